# catalogo/usecases/listar_produtos.py
"""
UC: listar produtos (com recorte opcional) e excluir com confirmação.

A lista mantém em memória a coleção lida da persistência. Após uma exclusão
bem-sucedida o produto sai da lista local imediatamente; em caso de falha a
lista fica como estava e o usuário é notificado.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from catalogo.domain.errors import PersistenceError
from catalogo.domain.models import Produto
from catalogo.infra.logger import log_produto, log_system_event, log_transaction
from catalogo.infra.repositories import ProdutoRepo


Filtro = Callable[[Produto], bool]
Confirmar = Callable[[str], bool]
Notificar = Callable[[str], None]

MSG_CONFIRMAR_EXCLUSAO = "Tem certeza que deseja excluir este produto?"


class ListaProdutos:
    def __init__(self, repo: ProdutoRepo, notificar: Notificar, filtro: Optional[Filtro] = None):
        self.repo = repo
        self.notificar = notificar
        self.filtro = filtro
        self.produtos: List[Produto] = []

    def carregar(self) -> List[Produto]:
        """Relê a coleção inteira da persistência (PersistenceError propaga)."""
        self.produtos = self.repo.get_all()
        log_system_event("produtos_carregados", {"total": len(self.produtos)})
        return self.visiveis()

    def visiveis(self) -> List[Produto]:
        if self.filtro is None:
            return list(self.produtos)
        return [p for p in self.produtos if self.filtro(p)]

    def excluir(self, produto_id: str, confirmar: Confirmar) -> bool:
        """Exclui após confirmação. Retorna True se o produto foi removido."""
        if not confirmar(MSG_CONFIRMAR_EXCLUSAO):
            return False
        try:
            self.repo.delete(produto_id)
        except PersistenceError as e:
            log_transaction("produto_delete", {"id": produto_id}, error=str(e))
            self.notificar(f"Erro ao excluir produto: {e}")
            return False
        self.produtos = [p for p in self.produtos if p.id != produto_id]
        log_produto("delete", produto_id)
        log_transaction("produto_delete", {"id": produto_id}, result="success")
        return True
