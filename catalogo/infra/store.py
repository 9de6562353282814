# catalogo/infra/store.py
"""
Fronteira de persistência: operações genéricas sobre coleções nomeadas.

Coleções:
- products
- shipments
- shipment_items  (relação ``product`` -> products via product_id)

Operações: fetch_all, fetch_joined, insert, update, delete. Filtros são por
igualdade (``where={"coluna": valor}``) e a ordenação é por uma coluna
(``order=("created_at", "desc")``). Toda falha do SQLite é convertida em
``PersistenceError``; cada chamada é uma escrita independente (sem transação
entre registros).
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from catalogo.domain.errors import PersistenceError
from catalogo.domain.models import novo_id
from catalogo.infra.db import connect
from catalogo.infra.logger import log_database_operation


Ordem = Union[str, Tuple[str, str], None]


@dataclass(frozen=True)
class Colecao:
    columns: Tuple[str, ...]
    json_cols: FrozenSet[str] = frozenset()
    bool_cols: FrozenSet[str] = frozenset()
    # alias -> (coleção relacionada, coluna local com o id)
    relations: Dict[str, Tuple[str, str]] = field(default_factory=dict)


COLLECTIONS: Dict[str, Colecao] = {
    "products": Colecao(
        columns=(
            "id", "created_at", "name", "technical_name", "classification",
            "images", "labels", "audio_slots", "is_visible",
            "stock_quantity", "monthly_production_goal",
            "production_type", "product_type", "variation_data",
            "benefits", "history", "composition", "safety_requirement",
        ),
        json_cols=frozenset({"images", "labels", "audio_slots", "variation_data"}),
        bool_cols=frozenset({"is_visible"}),
    ),
    "shipments": Colecao(
        columns=(
            "id", "created_at", "expected_arrival_date", "description",
            "voucher_url", "package_url", "status",
        ),
    ),
    "shipment_items": Colecao(
        columns=("id", "created_at", "shipment_id", "product_id", "quantity"),
        relations={"product": ("products", "product_id")},
    ),
}


def _agora() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _colecao(nome: str) -> Colecao:
    try:
        return COLLECTIONS[nome]
    except KeyError:
        raise ValueError(f"coleção desconhecida: {nome}") from None


def _check_cols(nome: str, col: Colecao, cols: Iterable[str]) -> None:
    desconhecidas = [c for c in cols if c not in col.columns]
    if desconhecidas:
        raise ValueError(f"colunas desconhecidas em {nome}: {desconhecidas}")


def _encode(col: Colecao, record: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in record.items():
        if k in col.json_cols:
            out[k] = json.dumps(v, ensure_ascii=False) if v is not None else None
        elif k in col.bool_cols:
            out[k] = 1 if v else 0
        else:
            out[k] = v
    return out


def _decode(col: Colecao, row: sqlite3.Row) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k in row.keys():
        v = row[k]
        if k in col.json_cols:
            out[k] = json.loads(v) if v else None
        elif k in col.bool_cols:
            out[k] = bool(v)
        else:
            out[k] = v
    return out


def _order_sql(nome: str, col: Colecao, order: Ordem) -> str:
    if order is None:
        return " ORDER BY rowid ASC"
    if isinstance(order, str):
        coluna, direcao = order, "asc"
    else:
        coluna, direcao = order
    _check_cols(nome, col, [coluna])
    direcao = direcao.lower()
    if direcao not in ("asc", "desc"):
        raise ValueError(f"direção de ordenação inválida: {direcao}")
    # rowid desempata registros com o mesmo valor
    return f" ORDER BY {coluna} {direcao.upper()}, rowid {direcao.upper()}"


class Store:
    def __init__(self, db_path: str):
        self.db_path = db_path

    # ---------- leitura ----------

    def fetch_all(
        self,
        collection: str,
        order: Ordem = None,
        where: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        col = _colecao(collection)
        where = dict(where or {})
        _check_cols(collection, col, where)
        sql = f"SELECT {', '.join(col.columns)} FROM {collection}"
        if where:
            sql += " WHERE " + " AND ".join(f"{k} = :{k}" for k in where)
        sql += _order_sql(collection, col, order)
        try:
            with connect(self.db_path) as c:
                rows = c.execute(sql, _encode(col, where)).fetchall()
        except sqlite3.Error as e:
            log_database_operation(collection, "SELECT", 0, error=str(e))
            raise PersistenceError(f"falha ao ler {collection}: {e}") from e
        log_database_operation(collection, "SELECT", len(rows))
        return [_decode(col, r) for r in rows]

    def fetch_joined(
        self,
        collection: str,
        join: Iterable[str],
        order: Ordem = None,
        where: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Lê ``collection`` e anexa cada relação pedida em ``join``.

        Uma relação cujo registro não existe mais vem como ``None``.
        """
        col = _colecao(collection)
        records = self.fetch_all(collection, order=order, where=where)
        for alias in join:
            if alias not in col.relations:
                raise ValueError(f"relação desconhecida em {collection}: {alias}")
            destino, fk = col.relations[alias]
            ids = sorted({r[fk] for r in records if r.get(fk) is not None})
            relacionados = self._fetch_by_ids(destino, ids)
            for r in records:
                r[alias] = relacionados.get(r.get(fk))
        return records

    def _fetch_by_ids(self, collection: str, ids: List[Any]) -> Dict[Any, Dict[str, Any]]:
        if not ids:
            return {}
        col = _colecao(collection)
        marks = ",".join("?" for _ in ids)
        sql = f"SELECT {', '.join(col.columns)} FROM {collection} WHERE id IN ({marks})"
        try:
            with connect(self.db_path) as c:
                rows = c.execute(sql, ids).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"falha ao ler {collection}: {e}") from e
        return {r["id"]: _decode(col, r) for r in rows}

    # ---------- escrita ----------

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insere e devolve o registro gravado (com ``id``/``created_at`` atribuídos)."""
        col = _colecao(collection)
        row = dict(record)
        _check_cols(collection, col, row)
        row.setdefault("created_at", _agora())
        if not row.get("id"):
            row["id"] = novo_id()
        keys = list(row.keys())
        sql = (
            f"INSERT INTO {collection} ({', '.join(keys)}) "
            f"VALUES ({', '.join(':' + k for k in keys)})"
        )
        try:
            with connect(self.db_path) as c:
                c.execute(sql, _encode(col, row))
        except sqlite3.Error as e:
            log_database_operation(collection, "INSERT", 0, id=row["id"], error=str(e))
            raise PersistenceError(f"falha ao inserir em {collection}: {e}") from e
        log_database_operation(collection, "INSERT", 1, id=row["id"])
        return row

    def update(self, collection: str, id: str, patch: Dict[str, Any]) -> None:
        col = _colecao(collection)
        patch = {k: v for k, v in patch.items() if k not in ("id", "created_at")}
        _check_cols(collection, col, patch)
        if not patch:
            return
        sets = ", ".join(f"{k} = :{k}" for k in patch)
        params = _encode(col, patch)
        params["__id"] = id
        try:
            with connect(self.db_path) as c:
                cur = c.execute(f"UPDATE {collection} SET {sets} WHERE id = :__id", params)
                affected = cur.rowcount
        except sqlite3.Error as e:
            log_database_operation(collection, "UPDATE", 0, id=id, error=str(e))
            raise PersistenceError(f"falha ao atualizar {collection}/{id}: {e}") from e
        log_database_operation(collection, "UPDATE", affected, id=id)
        if affected == 0:
            raise PersistenceError(f"registro {collection}/{id} não encontrado para atualização")

    def delete(self, collection: str, id: str) -> int:
        _colecao(collection)
        try:
            with connect(self.db_path) as c:
                affected = c.execute(f"DELETE FROM {collection} WHERE id = ?", (id,)).rowcount
        except sqlite3.Error as e:
            log_database_operation(collection, "DELETE", 0, id=id, error=str(e))
            raise PersistenceError(f"falha ao excluir {collection}/{id}: {e}") from e
        log_database_operation(collection, "DELETE", affected, id=id)
        return affected
