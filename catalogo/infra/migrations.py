# catalogo/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (products, shipments, shipment_items)
V2: adiciona ao produto as colunas de tipo de produção, tipo de produto e variações
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Cadastro de produtos (listas aninhadas como JSON em texto)
    """
    CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        created_at TEXT NOT NULL,
        name TEXT NOT NULL,
        technical_name TEXT,
        classification TEXT NOT NULL,
        images TEXT,              -- JSON: ["url", ...]
        labels TEXT,              -- JSON: [{"key": .., "value": ..}, ...]
        audio_slots TEXT,         -- JSON: [{"id", "title", "author", "url"}, ...]
        is_visible INTEGER DEFAULT 1,
        stock_quantity INTEGER DEFAULT 0,
        monthly_production_goal INTEGER DEFAULT 0,
        benefits TEXT,
        history TEXT,
        composition TEXT,
        safety_requirement TEXT
    );
    """,
    # Envios (remessas de estoque)
    """
    CREATE TABLE IF NOT EXISTS shipments (
        id TEXT PRIMARY KEY,
        created_at TEXT NOT NULL,
        expected_arrival_date TEXT,
        description TEXT,
        voucher_url TEXT,
        package_url TEXT,
        status TEXT NOT NULL DEFAULT 'pending' -- 'pending' | 'received'
    );
    """,
    # Itens do envio. product_id sem FK: o item sobrevive à exclusão do produto.
    """
    CREATE TABLE IF NOT EXISTS shipment_items (
        id TEXT PRIMARY KEY,
        created_at TEXT NOT NULL,
        shipment_id TEXT NOT NULL,
        product_id TEXT NOT NULL,
        quantity INTEGER NOT NULL CHECK (quantity > 0),
        FOREIGN KEY (shipment_id) REFERENCES shipments(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS ix_shipment_items_shipment ON shipment_items(shipment_id);",
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "products", "production_type", "production_type TEXT")
    _ensure_column(conn, "products", "product_type", "product_type TEXT")
    _ensure_column(conn, "products", "variation_data", "variation_data TEXT")  # JSON: {"sizes": [...]}


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2
