# catalogo/usecases/envios.py
"""
UC: envios de estoque.

- carregar_envios: lê envios (mais recentes primeiro) e itens com produto,
  associando itens a envios por ``shipment_id``.
- criar_envio: registra um envio ``pending`` e seus itens.
- PainelEnvios: estado da tela de envios (lista + detalhe aberto) e a
  transição ``pending -> received``.

Obs.:
- Totais (itens e unidades) são sempre derivados dos itens lidos.
- Um item cujo produto foi excluído continua válido e aparece como
  "Produto Removido".
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set

from catalogo.domain.errors import InvalidTransitionError, NotFoundError, PersistenceError, ValidationError
from catalogo.domain.models import STATUS_RECEBIDO, Envio
from catalogo.infra.logger import log_envio, log_system_event, log_transaction
from catalogo.infra.repositories import EnvioRepo, ProdutoRepo


Confirmar = Callable[[str], bool]
Notificar = Callable[[str], None]

MSG_CONFIRMAR_RECEBIMENTO = "Confirmar o recebimento deste envio?"


def carregar_envios(repo: EnvioRepo) -> List[Envio]:
    envios = repo.get_all()
    log_envio("load", None, total=len(envios))
    return envios


def criar_envio(
    envio_repo: EnvioRepo,
    produto_repo: ProdutoRepo,
    expected_arrival_date: str,
    itens: Dict[str, int],
    description: Optional[str] = None,
    voucher_url: Optional[str] = None,
    package_url: Optional[str] = None,
) -> Envio:
    """Registra um envio com os itens ``{product_id: quantidade}``.

    Raises:
        ValidationError: sem data prevista, sem itens, quantidade não positiva,
            produto inexistente ou quantidade acima do estoque do produto.
        PersistenceError: falha de gravação. Envio e itens são gravados um a
            um; itens já gravados não são desfeitos.
    """
    faltando = []
    if not str(expected_arrival_date or "").strip():
        faltando.append("expected_arrival_date")
    if not itens:
        faltando.append("items")
    if faltando:
        raise ValidationError(f"dados obrigatórios do envio ausentes: {', '.join(faltando)}", faltando)

    estoque = {p.id: p for p in produto_repo.get_all()}
    for produto_id, qtd in itens.items():
        if int(qtd) <= 0:
            raise ValidationError(f"quantidade inválida para {produto_id}: {qtd}", ["quantity"])
        produto = estoque.get(produto_id)
        if produto is None:
            raise ValidationError(f"produto {produto_id} não existe", ["product_id"])
        if int(qtd) > produto.stock_quantity:
            raise ValidationError(
                f"quantidade {qtd} acima do estoque de {produto.name} ({produto.stock_quantity})",
                ["quantity"],
            )

    dados = {"expected_arrival_date": expected_arrival_date, "itens": dict(itens)}
    try:
        envio = envio_repo.insert(
            expected_arrival_date=expected_arrival_date,
            description=description,
            voucher_url=voucher_url,
            package_url=package_url,
        )
        for produto_id, qtd in itens.items():
            envio.items.append(envio_repo.insert_item(envio.id, produto_id, int(qtd)))
    except PersistenceError as e:
        log_transaction("envio_create", dados, error=str(e))
        raise

    log_envio("create", envio.id, itens=len(envio.items), unidades=envio.total_unidades)
    log_transaction("envio_create", dados, result=envio.id)
    return envio


class PainelEnvios:
    """Lista de envios com detalhe aberto e a transição de recebimento."""

    def __init__(self, repo: EnvioRepo, notificar: Notificar):
        self.repo = repo
        self.notificar = notificar
        self.envios: List[Envio] = []
        self.selecionado: Optional[Envio] = None
        self._em_andamento: Set[str] = set()

    def carregar(self) -> List[Envio]:
        self.envios = carregar_envios(self.repo)
        if self.selecionado is not None:
            atual = self._buscar(self.selecionado.id)
            self.selecionado = atual
        return self.envios

    def _buscar(self, envio_id: str) -> Optional[Envio]:
        for envio in self.envios:
            if envio.id == envio_id:
                return envio
        return None

    def abrir_detalhe(self, envio_id: str) -> Envio:
        envio = self._buscar(envio_id)
        if envio is None:
            raise NotFoundError(f"envio {envio_id} não encontrado")
        self.selecionado = envio
        return envio

    def fechar_detalhe(self) -> None:
        self.selecionado = None

    def pode_marcar_recebido(self, envio_id: str) -> bool:
        envio = self._buscar(envio_id)
        return envio is not None and envio.pendente and envio_id not in self._em_andamento

    def marcar_recebido(self, envio_id: str, confirmar: Confirmar) -> bool:
        """Transição ``pending -> received``.

        Returns:
            True se o envio foi marcado como recebido; False se o usuário não
            confirmou ou se a gravação falhou (o envio continua ``pending``,
            o detalhe continua aberto e o usuário é notificado).

        Raises:
            NotFoundError: envio fora da lista carregada.
            InvalidTransitionError: envio já recebido ou transição em andamento.
        """
        envio = self._buscar(envio_id)
        if envio is None:
            raise NotFoundError(f"envio {envio_id} não encontrado")
        if not envio.pendente:
            raise InvalidTransitionError(f"envio {envio_id} já está {envio.status}")
        if envio_id in self._em_andamento:
            raise InvalidTransitionError(f"recebimento do envio {envio_id} já em andamento")
        if not confirmar(MSG_CONFIRMAR_RECEBIMENTO):
            return False

        self._em_andamento.add(envio_id)
        try:
            self.repo.set_status(envio_id, STATUS_RECEBIDO)
        except PersistenceError as e:
            log_transaction("envio_receber", {"id": envio_id}, error=str(e))
            self.notificar(f"Erro ao marcar envio como recebido: {e}")
            return False
        finally:
            self._em_andamento.discard(envio_id)

        log_envio("receive", envio_id)
        log_transaction("envio_receber", {"id": envio_id}, result=STATUS_RECEBIDO)

        if self.selecionado is not None and self.selecionado.id == envio_id:
            self.fechar_detalhe()
        try:
            self.carregar()
        except PersistenceError as e:
            # a gravação foi aceita; só a releitura falhou
            envio.status = STATUS_RECEBIDO
            log_system_event("envios_reload_error", {"error": str(e)}, level="error")
            self.notificar(f"Envio recebido, mas a lista não pôde ser atualizada: {e}")
        return True
