# catalogo/config.py
"""
Configurações globais e valores padrão do back-office do catálogo.
"""

import os
from dataclasses import dataclass, field
from typing import List


# Caminho padrão do banco de dados SQLite
DB_PATH = os.path.join(os.getcwd(), "catalogo.db")

# Variáveis de ambiente com os dados da sessão usada pela CLI
ENV_ROLE = "CATALOGO_ROLE"
ENV_SQUADS = "CATALOGO_SQUADS"


def _tamanhos_padrao() -> List[str]:
    return ["2 Litros", "5 Litros", "10 Litros", "10ml", "30ml", "50ml", "500ml", "1 Litro"]


@dataclass
class DefaultConfig:
    """Valores padrão do sistema."""
    tamanhos_disponiveis: List[str] = field(default_factory=_tamanhos_padrao)
    limite_estoque_baixo: int = 10   # abaixo disso o produto aparece no alerta do dashboard
    squad_vendas: str = "squad5"     # squad dona da área de vendas


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
