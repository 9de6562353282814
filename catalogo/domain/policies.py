"""
Regras de negócio puras do catálogo.

Este módulo reúne as regras que não dependem da persistência: edição de
listas endereçadas por índice, o conjunto de tamanhos das variações, a
junção de itens de envio aos envios e os agregados derivados. As funções
nunca alteram os argumentos recebidos; sempre devolvem novas coleções.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from catalogo.domain.models import (
    PRODUCT_TYPE_BULK,
    PRODUCT_TYPE_RETAIL,
    PRODUCTION_TYPES,
    Envio,
    ItemEnvio,
    Produto,
)

T = TypeVar("T")


def remover_item(seq: Sequence[T], index: int) -> List[T]:
    """Remove exatamente a posição ``index`` mantendo a ordem do restante.

    Args:
        seq: Sequência original (não é modificada).
        index: Posição a remover; precisa ser válida (``0 <= index < len(seq)``).

    Returns:
        Nova lista com ``len(seq) - 1`` elementos.

    Raises:
        IndexError: se o índice estiver fora da sequência.
    """
    if index < 0 or index >= len(seq):
        raise IndexError(f"índice {index} fora da lista (tamanho {len(seq)})")
    return [item for i, item in enumerate(seq) if i != index]


def alternar_tamanho(sizes: Iterable[str], size: str) -> List[str]:
    """Inclui ``size`` se ausente, remove se presente.

    Os tamanhos formam um conjunto: a ordem de inserção é mantida para
    exibição, mas não há duplicatas. Aplicar duas vezes com o mesmo
    argumento restaura a pertinência original.
    """
    atuais: List[str] = []
    for s in sizes:
        if s not in atuais:
            atuais.append(s)
    if size in atuais:
        return [s for s in atuais if s != size]
    return atuais + [size]


def normaliza_production_type(val: Optional[str]) -> Optional[str]:
    """Converte '' / 'none' em None; demais valores precisam estar em PRODUCTION_TYPES."""
    if val is None:
        return None
    s = str(val).strip().lower()
    if not s or s == "none":
        return None
    if s not in PRODUCTION_TYPES:
        raise ValueError(f"production_type inválido: {val!r}")
    return s


def normaliza_product_type(val: Optional[str]) -> Optional[str]:
    """Converte '' / 'none' em None; demais valores precisam ser 'bulk' ou 'retail'."""
    if val is None:
        return None
    s = str(val).strip().lower()
    if not s or s == "none":
        return None
    if s not in (PRODUCT_TYPE_BULK, PRODUCT_TYPE_RETAIL):
        raise ValueError(f"product_type inválido: {val!r}")
    return s


def variacoes_disponiveis(produto: Produto) -> bool:
    """O editor de tamanhos aparece com production_type definido OU product_type 'bulk'."""
    return bool(produto.production_type) or produto.product_type == PRODUCT_TYPE_BULK


def filtro_squad_vendas(produto: Produto) -> bool:
    """Recorte do catálogo visto pela squad de vendas.

    Produtos de varejo (``retail``) ou sem tipo e visíveis.
    """
    if produto.product_type == PRODUCT_TYPE_RETAIL:
        return True
    return not produto.product_type and bool(produto.is_visible)


def total_unidades(itens: Iterable[ItemEnvio]) -> int:
    """Soma de ``quantity`` dos itens (0 para nenhum item)."""
    return sum(int(item.quantity) for item in itens)


def join_por_chave(
    itens: Iterable[ItemEnvio],
    envios: Iterable[Envio],
    chave: str = "shipment_id",
) -> List[Envio]:
    """Associa itens aos envios por igualdade de ``chave`` com o id do envio.

    Monta um índice ``chave -> itens`` uma única vez (O(n + m)) e devolve
    cópias dos envios, na ordem recebida, com ``items`` preenchido na ordem
    de leitura. Itens cujo envio não está na lista são ignorados.
    """
    indice: Dict[str, List[ItemEnvio]] = defaultdict(list)
    for item in itens:
        indice[str(getattr(item, chave))].append(item)
    return [replace(envio, items=list(indice.get(str(envio.id), []))) for envio in envios]
