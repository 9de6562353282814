# catalogo/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- A camada de persistência trabalha com dicionários (registros em snake_case);
  as funções ``*_to_record`` / ``*_from_record`` fazem a ponte com as dataclasses.
- As sub-coleções (images, labels, audio_slots, variation_data.sizes) pertencem
  exclusivamente ao produto: nunca são compartilhadas entre instâncias.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Tipos de produção aceitos ('none' é normalizado para None)
PRODUCTION_TYPES = ("hidrolato", "oleo_essencial", "tintura", "outro")

PRODUCT_TYPE_BULK = "bulk"
PRODUCT_TYPE_RETAIL = "retail"

STATUS_PENDENTE = "pending"
STATUS_RECEBIDO = "received"
STATUS_ENVIO = (STATUS_PENDENTE, STATUS_RECEBIDO)

PRODUTO_REMOVIDO = "Produto Removido"


def novo_id() -> str:
    """Gera um identificador opaco (UUID4 em texto)."""
    return str(uuid.uuid4())


@dataclass
class Label:
    """Etiqueta chave/valor exibida na ficha do produto (chaves podem repetir)."""
    key: str = ""
    value: str = ""


@dataclass
class AudioSlot:
    """Áudio associado ao produto; o id é fixo durante a edição."""
    id: str
    title: str = ""
    author: str = ""
    url: str = ""


@dataclass
class VariationData:
    """Variações de tamanho (conjunto ordenado, sem duplicatas)."""
    sizes: List[str] = field(default_factory=list)


@dataclass
class Produto:
    """Cadastro de um item do catálogo."""
    id: str
    name: str = ""
    technical_name: str = ""
    classification: str = ""
    images: List[str] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)
    audio_slots: List[AudioSlot] = field(default_factory=list)
    is_visible: bool = True
    stock_quantity: int = 0
    monthly_production_goal: int = 0
    production_type: Optional[str] = None   # PRODUCTION_TYPES
    product_type: Optional[str] = None      # 'bulk' | 'retail' | None
    variation_data: Optional[VariationData] = None
    benefits: str = ""
    history: str = ""
    composition: str = ""
    safety_requirement: Optional[str] = None


@dataclass
class ItemEnvio:
    """Linha de um envio; ``product`` vem do join e pode ser None (produto excluído)."""
    id: str
    shipment_id: str
    product_id: str
    quantity: int
    product: Optional[Produto] = None

    @property
    def nome_produto(self) -> str:
        if self.product is None or not self.product.name:
            return PRODUTO_REMOVIDO
        return self.product.name


@dataclass
class Envio:
    """Remessa de estoque. ``items`` é montado por join em ``shipment_id``."""
    id: str
    created_at: str
    expected_arrival_date: Optional[str] = None
    description: Optional[str] = None
    voucher_url: Optional[str] = None
    package_url: Optional[str] = None
    status: str = STATUS_PENDENTE
    items: List[ItemEnvio] = field(default_factory=list)

    @property
    def quantidade_itens(self) -> int:
        return len(self.items)

    @property
    def total_unidades(self) -> int:
        # recalculado a cada leitura; nunca persistido
        return sum(item.quantity for item in self.items)

    @property
    def pendente(self) -> bool:
        return self.status == STATUS_PENDENTE


def novo_produto_em_branco() -> Produto:
    """Modelo em branco para o modo de criação.

    O produto recebe um id novo e uma entrada vazia em ``images`` e em
    ``labels``, para que o editor sempre tenha uma linha por lista.
    """
    return Produto(
        id=novo_id(),
        images=[""],
        labels=[Label()],
    )


# -------------------------
# Registros <-> dataclasses
# -------------------------

def _to_int(val: Any) -> int:
    try:
        return int(val or 0)
    except (TypeError, ValueError):
        return 0


def produto_to_record(p: Produto) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "technical_name": p.technical_name,
        "classification": p.classification,
        "images": list(p.images),
        "labels": [{"key": l.key, "value": l.value} for l in p.labels],
        "audio_slots": [
            {"id": a.id, "title": a.title, "author": a.author, "url": a.url}
            for a in p.audio_slots
        ],
        "is_visible": bool(p.is_visible),
        "stock_quantity": int(p.stock_quantity),
        "monthly_production_goal": int(p.monthly_production_goal),
        "production_type": p.production_type,
        "product_type": p.product_type,
        "variation_data": (
            {"sizes": list(p.variation_data.sizes)} if p.variation_data is not None else None
        ),
        "benefits": p.benefits,
        "history": p.history,
        "composition": p.composition,
        "safety_requirement": p.safety_requirement,
    }


def produto_from_record(r: Dict[str, Any]) -> Produto:
    variation = r.get("variation_data")
    return Produto(
        id=str(r["id"]),
        name=r.get("name") or "",
        technical_name=r.get("technical_name") or "",
        classification=r.get("classification") or "",
        images=list(r.get("images") or []),
        labels=[
            Label(key=l.get("key") or "", value=l.get("value") or "")
            for l in (r.get("labels") or [])
        ],
        audio_slots=[
            AudioSlot(
                id=str(a.get("id") or novo_id()),
                title=a.get("title") or "",
                author=a.get("author") or "",
                url=a.get("url") or "",
            )
            for a in (r.get("audio_slots") or [])
        ],
        is_visible=bool(r.get("is_visible")),
        stock_quantity=_to_int(r.get("stock_quantity")),
        monthly_production_goal=_to_int(r.get("monthly_production_goal")),
        production_type=r.get("production_type") or None,
        product_type=r.get("product_type") or None,
        variation_data=(
            VariationData(sizes=list(variation.get("sizes") or []))
            if isinstance(variation, dict) else None
        ),
        benefits=r.get("benefits") or "",
        history=r.get("history") or "",
        composition=r.get("composition") or "",
        safety_requirement=r.get("safety_requirement"),
    )


def item_from_record(r: Dict[str, Any]) -> ItemEnvio:
    prod = r.get("product")
    return ItemEnvio(
        id=str(r["id"]),
        shipment_id=str(r["shipment_id"]),
        product_id=str(r["product_id"]),
        quantity=_to_int(r.get("quantity")),
        product=produto_from_record(prod) if prod else None,
    )


def envio_from_record(r: Dict[str, Any]) -> Envio:
    return Envio(
        id=str(r["id"]),
        created_at=r.get("created_at") or "",
        expected_arrival_date=r.get("expected_arrival_date"),
        description=r.get("description"),
        voucher_url=r.get("voucher_url"),
        package_url=r.get("package_url"),
        status=r.get("status") or STATUS_PENDENTE,
    )
