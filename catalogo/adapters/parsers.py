"""
Utilidades de parsing para valores digitados no terminal ou lidos de planilha.

Este módulo interpreta os formatos de texto usados para as listas do
produto: etiquetas no formato ``chave: valor`` (ou ``chave=valor``)
separadas por ponto e vírgula, listas de URLs separadas por ponto e
vírgula ou quebra de linha, e listas de squads separadas por vírgula.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

_SEP_LISTA_RE = re.compile(r"[;\n]+")
_SEP_LABEL_RE = re.compile(r"\s*[:=]\s*")


def parse_lista(txt: Optional[str], sep: Optional[str] = None) -> List[str]:
    """Divide ``txt`` em itens não vazios, sem espaços nas pontas.

    Por padrão separa por ``;`` e quebras de linha (URLs podem conter
    vírgulas). Com ``sep`` informado, usa apenas esse separador.

    Exemplos:
        "a.jpg; b.jpg"        → ["a.jpg", "b.jpg"]
        "squad5,squad2"  (sep=",") → ["squad5", "squad2"]
        None / ""             → []
    """
    if txt is None:
        return []
    s = str(txt).strip()
    if not s:
        return []
    partes = s.split(sep) if sep else _SEP_LISTA_RE.split(s)
    return [p.strip() for p in partes if p.strip()]


def parse_label_raw(txt: Optional[str]) -> Optional[Tuple[str, str]]:
    """Interpreta uma etiqueta ``chave: valor``.

    Exemplos:
        "Grau: 1º Grau"   → ("Grau", "1º Grau")
        "Origem=Cerrado"  → ("Origem", "Cerrado")
        "Orgânico"        → ("Orgânico", "")
        ""                → None
    """
    if txt is None:
        return None
    s = str(txt).strip()
    if not s:
        return None
    partes = _SEP_LABEL_RE.split(s, maxsplit=1)
    chave = partes[0].strip()
    valor = partes[1].strip() if len(partes) > 1 else ""
    return chave, valor


def parse_labels(txt: Optional[str]) -> List[Tuple[str, str]]:
    """Várias etiquetas separadas por ``;`` (ordem e chaves repetidas preservadas)."""
    out: List[Tuple[str, str]] = []
    for parte in parse_lista(txt):
        label = parse_label_raw(parte)
        if label is not None:
            out.append(label)
    return out
