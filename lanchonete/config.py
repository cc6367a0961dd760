# lanchonete/config.py
"""
Configurações globais e valores padrão do sistema da lanchonete.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


# Carrega OPENAI_API_KEY e demais variáveis de um .env, se existir
load_dotenv()

# Caminho padrão do banco de dados SQLite
DB_PATH = os.getenv("LANCHONETE_DB", os.path.join(os.getcwd(), "lanchonete.db"))


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    pontos_por_real: float = 10.0  # R$ gastos por ponto de fidelidade
    fator_reposicao: float = 2.0  # sugestão = estoque_minimo * fator - estoque
    bloquear_estoque_negativo: bool = False  # venda nunca é bloqueada por padrão
    modelo_ia: str = field(default_factory=lambda: os.getenv("LANCHONETE_MODELO_IA", "gpt-4o-mini"))
    timeout_ia_segundos: float = 30.0


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
