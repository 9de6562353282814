# catalogo/usecases/relatorios.py
"""
Relatórios do back-office:
- resumo do catálogo (estoque total e produtos com estoque baixo)
- resumo dos envios (itens, unidades e status por envio)

Ambos devolvem ``(colunas, linhas, mensagem)`` para exibição tabular.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from catalogo.config import DB_PATH, DEFAULTS
from catalogo.domain.models import STATUS_PENDENTE, Produto
from catalogo.infra.logger import log_system_event
from catalogo.infra.repositories import EnvioRepo, ProdutoRepo
from catalogo.infra.store import Store
from catalogo.usecases.envios import carregar_envios


def resumo_catalogo(
    db_path: str = DB_PATH,
    filtro: Optional[Callable[[Produto], bool]] = None,
    limite_estoque_baixo: int = DEFAULTS.limite_estoque_baixo,
) -> tuple[list[str], list[list], str | None]:
    """
    Lista os produtos com estoque abaixo de ``limite_estoque_baixo``.

    A mensagem traz o total de produtos e o estoque somado de todos eles
    (após o filtro, se houver).
    """
    produtos = ProdutoRepo(Store(db_path)).get_all()
    if filtro is not None:
        produtos = [p for p in produtos if filtro(p)]

    estoque_total = sum(p.stock_quantity for p in produtos)
    baixos = sorted(
        (p for p in produtos if p.stock_quantity < limite_estoque_baixo),
        key=lambda p: (p.stock_quantity, p.name),
    )

    cols = ["id", "nome", "classificação", "estoque", "meta mensal"]
    rows = [
        [p.id, p.name, p.classification, p.stock_quantity, p.monthly_production_goal]
        for p in baixos
    ]
    msg = (
        f"{len(produtos)} produto(s); estoque total: {estoque_total} unidade(s); "
        f"{len(baixos)} abaixo de {limite_estoque_baixo}."
    )
    log_system_event("relatorio_catalogo", {"produtos": len(produtos), "baixos": len(baixos)})
    return cols, rows, msg


def resumo_envios(db_path: str = DB_PATH) -> tuple[list[str], list[list], str | None]:
    """Um envio por linha, do mais recente para o mais antigo."""
    envios = carregar_envios(EnvioRepo(Store(db_path)))
    cols = ["id", "criado em", "chegada prevista", "itens", "unidades", "status"]
    rows: List[list] = [
        [
            e.id,
            e.created_at,
            e.expected_arrival_date or "",
            e.quantidade_itens,
            e.total_unidades,
            e.status,
        ]
        for e in envios
    ]
    if not rows:
        return cols, rows, "Nenhum envio registrado."
    pendentes = [e for e in envios if e.status == STATUS_PENDENTE]
    msg = (
        f"{len(envios)} envio(s); {len(pendentes)} em trânsito com "
        f"{sum(e.total_unidades for e in pendentes)} unidade(s)."
    )
    return cols, rows, msg
