# catalogo/usecases/editar_produto.py
"""
UC: editar um rascunho de produto (criação ou edição) e enviá-lo à persistência.

Fluxo:
1) O editor nasce em um de dois modos, fixos durante toda a vida da instância:
   - ``creating``: rascunho a partir do modelo em branco (id já atribuído);
   - ``editing``: cópia profunda de um produto existente.
2) As operações de edição alteram apenas o rascunho local, na ordem em que
   são chamadas. Descartar o editor não tem efeito na persistência.
3) ``submit()`` valida ``name`` e ``classification`` e grava o rascunho
   inteiro (insert no modo de criação, update no modo de edição).

Regra de variações: alternar um tamanho sempre chama
``enable_bulk_variations()``, que força ``product_type = 'bulk'``. Remover o
último tamanho NÃO desfaz o ``bulk``.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any, Dict, List, Optional

from catalogo.config import DEFAULTS
from catalogo.domain.errors import PersistenceError, SubmitInProgressError, ValidationError
from catalogo.domain.models import (
    PRODUCT_TYPE_BULK,
    AudioSlot,
    Label,
    Produto,
    VariationData,
    novo_id,
    novo_produto_em_branco,
)
from catalogo.domain.policies import (
    alternar_tamanho,
    normaliza_product_type,
    normaliza_production_type,
    remover_item,
    variacoes_disponiveis,
)
from catalogo.infra.logger import log_produto, log_transaction
from catalogo.infra.repositories import ProdutoRepo


MODO_CRIACAO = "creating"
MODO_EDICAO = "editing"

LISTAS = ("images", "labels", "audio_slots")

CAMPOS_TEXTO = (
    "name", "technical_name", "classification",
    "benefits", "history", "composition", "safety_requirement",
)
CAMPOS_INTEIROS = ("stock_quantity", "monthly_production_goal")
CAMPOS_ESCALARES = CAMPOS_TEXTO + CAMPOS_INTEIROS + ("is_visible", "production_type", "product_type")

CAMPOS_OBRIGATORIOS = ("name", "classification")


def _to_int_nao_negativo(val: Any) -> int:
    # mesmo comportamento do campo numérico do formulário: inválido vira 0
    try:
        i = int(str(val).strip())
    except (TypeError, ValueError):
        return 0
    return max(i, 0)


def _to_bool(val: Any) -> bool:
    if isinstance(val, str):
        return val.strip().lower() in {"1", "true", "t", "sim", "s", "y", "yes"}
    return bool(val)


class EditorProduto:
    """Rascunho mutável de um produto."""

    def __init__(self, repo: ProdutoRepo, produto: Optional[Produto] = None):
        self.repo = repo
        if produto is None:
            self.modo = MODO_CRIACAO
            self.rascunho = novo_produto_em_branco()
        else:
            self.modo = MODO_EDICAO
            self.rascunho = copy.deepcopy(produto)
        self._enviando = False

    @property
    def criando(self) -> bool:
        return self.modo == MODO_CRIACAO

    @property
    def enviando(self) -> bool:
        return self._enviando

    @property
    def variacoes_disponiveis(self) -> bool:
        return variacoes_disponiveis(self.rascunho)

    # ---------- campos escalares ----------

    def set_field(self, nome: str, valor: Any) -> None:
        if nome not in CAMPOS_ESCALARES:
            raise ValueError(f"campo não editável: {nome}")
        if nome in CAMPOS_INTEIROS:
            valor = _to_int_nao_negativo(valor)
        elif nome == "is_visible":
            valor = _to_bool(valor)
        elif nome == "production_type":
            valor = normaliza_production_type(valor)
        elif nome == "product_type":
            valor = normaliza_product_type(valor)
        elif nome == "safety_requirement":
            valor = str(valor) if valor is not None else None
        else:
            valor = "" if valor is None else str(valor)
        setattr(self.rascunho, nome, valor)

    # ---------- listas (images, labels, audio_slots) ----------

    def _lista(self, lista: str) -> List[Any]:
        if lista not in LISTAS:
            raise ValueError(f"lista desconhecida: {lista}")
        return getattr(self.rascunho, lista)

    def set_list_item(self, lista: str, index: int, patch: Any) -> None:
        itens = self._lista(lista)
        if index < 0 or index >= len(itens):
            raise IndexError(f"índice {index} fora de {lista} (tamanho {len(itens)})")
        if lista == "images":
            itens[index] = "" if patch is None else str(patch)
            return
        campos = _patch_dict(patch)
        atual = itens[index]
        if lista == "labels":
            permitidos = {"key", "value"}
        else:
            if "id" in campos and campos["id"] != atual.id:
                raise ValueError("o id do áudio não pode ser alterado")
            campos.pop("id", None)
            permitidos = {"title", "author", "url"}
        extras = set(campos) - permitidos
        if extras:
            raise ValueError(f"campos inválidos para {lista}: {sorted(extras)}")
        itens[index] = replace(atual, **campos)

    def append_list_item(self, lista: str, valor: Any = None) -> None:
        itens = self._lista(lista)
        if lista == "images":
            itens.append("" if valor is None else str(valor))
        elif lista == "labels":
            campos = _patch_dict(valor) if valor is not None else {}
            itens.append(Label(key=campos.get("key", ""), value=campos.get("value", "")))
        else:
            campos = _patch_dict(valor) if valor is not None else {}
            # o id do novo áudio é sempre gerado aqui
            itens.append(AudioSlot(
                id=novo_id(),
                title=campos.get("title", ""),
                author=campos.get("author", ""),
                url=campos.get("url", ""),
            ))

    def remove_list_item(self, lista: str, index: int) -> None:
        itens = self._lista(lista)
        setattr(self.rascunho, lista, remover_item(itens, index))

    def linhas_editaveis(self, lista: str) -> List[Any]:
        """Itens a exibir no formulário; images/labels sempre têm ao menos uma linha."""
        itens = list(self._lista(lista))
        if not itens and lista == "images":
            return [""]
        if not itens and lista == "labels":
            return [Label()]
        return itens

    # ---------- variações ----------

    def enable_bulk_variations(self) -> None:
        """Transição explícita: o produto passa a ser ``bulk`` com variações."""
        self.rascunho.product_type = PRODUCT_TYPE_BULK
        if self.rascunho.variation_data is None:
            self.rascunho.variation_data = VariationData()

    def toggle_size(self, size: str) -> None:
        """Alterna ``size``; só tamanhos de ``DEFAULTS.tamanhos_disponiveis`` podem entrar."""
        atuais = self.rascunho.variation_data.sizes if self.rascunho.variation_data else []
        if size not in atuais and size not in DEFAULTS.tamanhos_disponiveis:
            raise ValueError(f"tamanho indisponível: {size!r}")
        self.enable_bulk_variations()
        vd = self.rascunho.variation_data
        vd.sizes = alternar_tamanho(vd.sizes, size)

    # ---------- envio ----------

    def validar(self) -> None:
        faltando = [c for c in CAMPOS_OBRIGATORIOS if not str(getattr(self.rascunho, c) or "").strip()]
        if faltando:
            raise ValidationError(
                f"campos obrigatórios não preenchidos: {', '.join(faltando)}", faltando
            )

    def submit(self) -> Produto:
        """Grava o rascunho completo.

        Raises:
            SubmitInProgressError: se já houver um envio deste editor em andamento.
            ValidationError: ``name`` ou ``classification`` vazios (nada é gravado).
            PersistenceError: falha na gravação; o rascunho é preservado.
        """
        if self._enviando:
            raise SubmitInProgressError(f"envio do produto {self.rascunho.id} já em andamento")
        self.validar()

        operacao = "produto_create" if self.criando else "produto_update"
        produto = copy.deepcopy(self.rascunho)
        self._enviando = True
        try:
            if self.criando:
                self.repo.insert(produto)
            else:
                self.repo.update(produto)
        except PersistenceError as e:
            log_transaction(operacao, {"id": produto.id, "name": produto.name}, error=str(e))
            raise
        finally:
            self._enviando = False

        log_produto("create" if self.criando else "update", produto.id, name=produto.name)
        log_transaction(operacao, {"id": produto.id, "name": produto.name}, result="success")
        return produto


def _patch_dict(patch: Any) -> Dict[str, Any]:
    if isinstance(patch, dict):
        return {k: ("" if v is None else str(v)) for k, v in patch.items()}
    if isinstance(patch, (Label, AudioSlot)):
        return dict(vars(patch))
    raise TypeError("patch deve ser dict, Label ou AudioSlot")
