# catalogo/adapters/planilha_loader.py
"""
Loader de planilhas (XLSX ou CSV) de PRODUTOS.

Essas funções:
- leem a planilha usando pandas (XLSX via openpyxl);
- normalizam cabeçalhos (acentos, variações, sinônimos);
- retornam listas de dicionários com as chaves esperadas pelo editor de produto.

Observações:
- Imagens vêm separadas por ``;``; etiquetas como ``chave: valor; chave: valor``.
- Campos booleanos são mapeados para True/False (vazio = visível).
- Datas são normalizadas para ISO (YYYY-MM-DD) quando possível.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
import re

import pandas as pd

from catalogo.adapters.parsers import parse_labels, parse_lista


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key):
    """Lê um valor da linha tratando NA/vazio como None."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _to_bool(val: Any, default: bool = True) -> bool:
    if val is None:
        return default
    s = str(val).strip().lower()
    if s in {"1", "true", "t", "sim", "s", "y", "yes", "visivel", "visível"}:
        return True
    if s in {"0", "false", "f", "nao", "não", "n", "no", "oculto"}:
        return False
    return default


def to_date_iso(val: Any) -> Optional[str]:
    """Converte valor para data ISO (YYYY-MM-DD) se possível."""
    if val is None:
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val.date().isoformat()
    s = str(val).strip()
    if not s:
        return None
    # ISO primeiro: dayfirst inverteria dia e mês em "2025-03-04"
    try:
        return datetime.strptime(s, "%Y-%m-%d").date().isoformat()
    except ValueError:
        pass
    d = pd.to_datetime(s, dayfirst=True, errors="coerce")
    if pd.isna(d):
        return None
    return d.date().isoformat()


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    aliases = {
        "nome": "name",
        "name": "name",
        "produto": "name",

        "nome tecnico": "technical_name",
        "nome cientifico": "technical_name",
        "technical name": "technical_name",

        "classificacao": "classification",
        "classification": "classification",
        "categoria": "classification",

        "imagens": "images",
        "imagem": "images",
        "images": "images",
        "fotos": "images",

        "etiquetas": "labels",
        "labels": "labels",

        "visivel": "is_visible",
        "is visible": "is_visible",
        "ativo": "is_visible",

        "estoque": "stock_quantity",
        "quantidade": "stock_quantity",
        "stock quantity": "stock_quantity",

        "meta mensal": "monthly_production_goal",
        "meta de producao": "monthly_production_goal",
        "meta mensal de producao": "monthly_production_goal",

        "tipo de producao": "production_type",
        "production type": "production_type",

        "tipo de produto": "product_type",
        "tipo": "product_type",
        "product type": "product_type",

        "tamanhos": "sizes",
        "variacoes": "sizes",

        "beneficios": "benefits",
        "historia": "history",
        "composicao": "composition",
        "requisito de seguranca": "safety_requirement",
        "seguranca": "safety_requirement",
    }

    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = aliases.get(key, key)  # se não houver alias, mantém slug
    return df.rename(columns=new_cols)


def _read(path: str) -> pd.DataFrame:
    if Path(path).suffix.lower() == ".csv":
        return pd.read_csv(path, dtype="string", keep_default_na=False)
    return pd.read_excel(path, dtype="string")


# ---------------------------
# loader público
# ---------------------------

def load_produtos(path: str) -> List[Dict[str, Any]]:
    """Lê a planilha de PRODUTOS.

    Campos de saída (chaves do dict por linha):
      - name, technical_name, classification: str | None
      - images: list[str]
      - labels: list[(chave, valor)]
      - is_visible: bool
      - stock_quantity, monthly_production_goal: str | None (o editor converte)
      - production_type, product_type: str | None
      - sizes: list[str]
      - benefits, history, composition, safety_requirement: str | None
    """
    df = _normalize_columns(_read(path))
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        rec = {
            "name": _safe_get(row, "name"),
            "technical_name": _safe_get(row, "technical_name"),
            "classification": _safe_get(row, "classification"),
            "images": parse_lista(_safe_get(row, "images")),
            "labels": parse_labels(_safe_get(row, "labels")),
            "is_visible": _to_bool(_safe_get(row, "is_visible")),
            "stock_quantity": _safe_get(row, "stock_quantity"),
            "monthly_production_goal": _safe_get(row, "monthly_production_goal"),
            "production_type": _safe_get(row, "production_type"),
            "product_type": _safe_get(row, "product_type"),
            "sizes": parse_lista(_safe_get(row, "sizes"), sep=","),
            "benefits": _safe_get(row, "benefits"),
            "history": _safe_get(row, "history"),
            "composition": _safe_get(row, "composition"),
            "safety_requirement": _safe_get(row, "safety_requirement"),
        }
        out.append(rec)
    return out
