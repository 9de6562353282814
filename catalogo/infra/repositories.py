# catalogo/infra/repositories.py
"""
Repositórios sobre a fronteira de persistência (``Store``).

Classes:
- ProdutoRepo
- EnvioRepo

Convertem registros (dicts em snake_case) nas dataclasses do domínio.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from catalogo.domain.errors import NotFoundError
from catalogo.domain.models import (
    STATUS_PENDENTE,
    Envio,
    ItemEnvio,
    Produto,
    envio_from_record,
    item_from_record,
    produto_from_record,
    produto_to_record,
)
from catalogo.domain.policies import join_por_chave
from catalogo.infra.store import Store


# -------------------------
# Produto
# -------------------------

class ProdutoRepo:
    COLLECTION = "products"

    def __init__(self, store: Store):
        self.store = store

    def get_all(self) -> List[Produto]:
        rows = self.store.fetch_all(self.COLLECTION, order=("created_at", "asc"))
        return [produto_from_record(r) for r in rows]

    def get(self, produto_id: str) -> Produto:
        rows = self.store.fetch_all(self.COLLECTION, where={"id": produto_id})
        if not rows:
            raise NotFoundError(f"produto {produto_id} não encontrado")
        return produto_from_record(rows[0])

    def insert(self, produto: Produto) -> None:
        self.store.insert(self.COLLECTION, produto_to_record(produto))

    def update(self, produto: Produto) -> None:
        rec = produto_to_record(produto)
        self.store.update(self.COLLECTION, rec.pop("id"), rec)

    def delete(self, produto_id: str) -> int:
        return self.store.delete(self.COLLECTION, produto_id)


# -------------------------
# Envio / Itens de envio
# -------------------------

class EnvioRepo:
    COLLECTION = "shipments"
    ITEMS = "shipment_items"

    def __init__(self, store: Store):
        self.store = store

    def get_all(self) -> List[Envio]:
        """Envios mais recentes primeiro, com itens (e produto) associados."""
        envios = [
            envio_from_record(r)
            for r in self.store.fetch_all(self.COLLECTION, order=("created_at", "desc"))
        ]
        itens = [
            item_from_record(r)
            for r in self.store.fetch_joined(self.ITEMS, join=["product"])
        ]
        return join_por_chave(itens, envios, chave="shipment_id")

    def get(self, envio_id: str) -> Envio:
        rows = self.store.fetch_all(self.COLLECTION, where={"id": envio_id})
        if not rows:
            raise NotFoundError(f"envio {envio_id} não encontrado")
        itens = [
            item_from_record(r)
            for r in self.store.fetch_joined(
                self.ITEMS, join=["product"], where={"shipment_id": envio_id}
            )
        ]
        return join_por_chave(itens, [envio_from_record(rows[0])])[0]

    def insert(
        self,
        expected_arrival_date: str,
        description: Optional[str] = None,
        voucher_url: Optional[str] = None,
        package_url: Optional[str] = None,
    ) -> Envio:
        rec: Dict[str, Any] = {
            "expected_arrival_date": expected_arrival_date,
            "description": description,
            "voucher_url": voucher_url,
            "package_url": package_url,
            "status": STATUS_PENDENTE,
        }
        return envio_from_record(self.store.insert(self.COLLECTION, rec))

    def insert_item(self, envio_id: str, produto_id: str, quantity: int) -> ItemEnvio:
        rec = self.store.insert(
            self.ITEMS,
            {"shipment_id": envio_id, "product_id": produto_id, "quantity": int(quantity)},
        )
        return item_from_record(rec)

    def set_status(self, envio_id: str, status: str) -> None:
        self.store.update(self.COLLECTION, envio_id, {"status": status})
