# catalogo/domain/errors.py
"""
Erros do domínio do catálogo.

- ValidationError: campo obrigatório ausente no envio de um rascunho.
- PersistenceError: qualquer falha de leitura/escrita na camada de persistência.
- NotFoundError: registro inexistente buscado por id.
"""

from __future__ import annotations

from typing import Iterable, List


class CatalogoError(Exception):
    pass


class ValidationError(CatalogoError):
    """Campos obrigatórios ausentes ou dados inválidos."""

    def __init__(self, message: str, campos: Iterable[str] = ()):
        super().__init__(message)
        self.campos: List[str] = list(campos)


class PersistenceError(CatalogoError):
    """Falha na camada de persistência (create/update/delete/fetch)."""


class NotFoundError(CatalogoError):
    """Registro não encontrado."""


class SubmitInProgressError(CatalogoError):
    """Já existe um envio em andamento para o mesmo rascunho."""


class InvalidTransitionError(CatalogoError):
    """Transição de status não permitida a partir do status atual."""
