# catalogo/usecases/importar_produtos.py
"""
UC: importar PRODUTOS em lote a partir de uma planilha (XLSX/CSV).

Cada linha vira um rascunho no modo de criação e passa pelo mesmo
``submit()`` do formulário: linhas sem nome ou classificação são
recusadas e reportadas, sem interromper as demais.
"""
from __future__ import annotations

from typing import Any, Dict, List

from catalogo.adapters.planilha_loader import load_produtos
from catalogo.config import DB_PATH
from catalogo.domain.errors import PersistenceError, ValidationError
from catalogo.infra.logger import log_produto, log_system_event, log_transaction
from catalogo.infra.repositories import ProdutoRepo
from catalogo.infra.store import Store
from catalogo.usecases.editar_produto import CAMPOS_ESCALARES, EditorProduto


def _preenche_lista(editor: EditorProduto, lista: str, valores: List[Any]) -> None:
    """Substitui a linha em branco do modelo pelos valores lidos."""
    for valor in valores:
        editor.append_list_item(lista, valor)
    if valores:
        editor.remove_list_item(lista, 0)


def editor_from_row(repo: ProdutoRepo, row: Dict[str, Any]) -> EditorProduto:
    editor = EditorProduto(repo)
    for campo in CAMPOS_ESCALARES:
        if row.get(campo) is not None:
            editor.set_field(campo, row[campo])
    _preenche_lista(editor, "images", row.get("images") or [])
    _preenche_lista(
        editor, "labels",
        [{"key": k, "value": v} for k, v in (row.get("labels") or [])],
    )
    for size in row.get("sizes") or []:
        editor.toggle_size(size)
    return editor


def run_importar_produtos(path: str, db_path: str = DB_PATH) -> Dict[str, Any]:
    """Lê a planilha e grava cada produto válido."""
    log_system_event("importar_produtos_start", {"file_path": path})
    rows = load_produtos(path)
    repo = ProdutoRepo(Store(db_path))

    sucessos = 0
    erros: List[Dict[str, Any]] = []
    for i, row in enumerate(rows, start=2):  # linha 1 é o cabeçalho
        try:
            produto = editor_from_row(repo, row).submit()
        except (ValidationError, ValueError) as e:
            erros.append({"linha": i, "mensagem": str(e)})
            continue
        except PersistenceError as e:
            erros.append({"linha": i, "mensagem": f"falha ao gravar: {e}"})
            continue
        log_produto("import", produto.id, name=produto.name, linha=i)
        sucessos += 1

    result = {
        "tipo": "Produtos",
        "arquivo": path,
        "registros": len(rows),
        "total": len(rows),
        "sucessos": sucessos,
        "erros": erros,
    }
    log_transaction("importar_produtos", {"file": path, "rows_count": len(rows)},
                    result={"sucessos": sucessos, "erros": len(erros)})
    return result
