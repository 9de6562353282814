"""
Política de acesso às áreas administrativas por papel (role) e squads.

A decisão é uma função pura do estado da sessão. O ``PortaoAcesso`` fica na
fronteira com a navegação: reavalia a cada mudança de sessão, mas só pede
redirecionamento quando a decisão muda, evitando laços de redirect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from catalogo.config import DEFAULTS


ROLES = (
    "superadmin", "otter", "mutum_manager",
    "squad3", "squad4", "squad5", "squad6", "squad7", "squad8", "squad9",
    "public", "sales_viewer",
)

# Papéis com acesso irrestrito às áreas de squad
ROLES_GLOBAIS = ("superadmin", "otter")

ADMITIDO = "admitido"
NEGADO = "negado"
CARREGANDO = "carregando"

ROTA_RAIZ = "/"
ROTA_LOGIN = "/login"


@dataclass
class Sessao:
    """Dados do usuário autenticado relevantes para o controle de acesso."""
    role: Optional[str] = None
    squads: List[str] = field(default_factory=list)


@dataclass
class EstadoSessao:
    """Estado exposto pela camada de autenticação."""
    session: Optional[Sessao] = None
    loading: bool = False


@dataclass(frozen=True)
class Decisao:
    status: str                              # ADMITIDO | NEGADO | CARREGANDO
    redirecionar_para: Optional[str] = None

    @property
    def admitido(self) -> bool:
        return self.status == ADMITIDO


def pode_acessar_area_squad(role: Optional[str], squads: Iterable[str], squad: str) -> bool:
    """Admite papéis globais, o papel da própria squad ou quem é membro dela."""
    if role in ROLES_GLOBAIS or role == squad:
        return True
    return squad in set(squads or ())


def decidir_acesso(estado: EstadoSessao, squad: str = DEFAULTS.squad_vendas) -> Decisao:
    """Decide a admissão na área administrativa de ``squad``.

    Regras:
        - Sessão carregando → ``CARREGANDO`` (sem redirecionamento).
        - Sem sessão → ``NEGADO``, redireciona para o login.
        - ``pode_acessar_area_squad`` verdadeiro → ``ADMITIDO``.
        - Caso contrário → ``NEGADO``, redireciona para a raiz do site.
    """
    if estado.loading:
        return Decisao(CARREGANDO)
    sessao = estado.session
    if sessao is None:
        return Decisao(NEGADO, ROTA_LOGIN)
    if pode_acessar_area_squad(sessao.role, sessao.squads, squad):
        return Decisao(ADMITIDO)
    return Decisao(NEGADO, ROTA_RAIZ)


class PortaoAcesso:
    """Reavalia a política e só devolve navegação em mudança de decisão."""

    def __init__(self, squad: str = DEFAULTS.squad_vendas):
        self.squad = squad
        self.ultima: Optional[Decisao] = None

    def avaliar(self, estado: EstadoSessao) -> Optional[str]:
        decisao = decidir_acesso(estado, self.squad)
        mudou = decisao != self.ultima
        self.ultima = decisao
        if mudou and decisao.status == NEGADO:
            return decisao.redirecionar_para
        return None
