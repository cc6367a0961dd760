"""
Fórmulas de precificação de carrinho e de fidelidade.

Todas as funções são puras: dependem apenas das entradas. Valores
monetários são arredondados a 2 casas apenas na montagem do registro de
venda, não aqui.
"""

from math import floor
from typing import Iterable, Optional

from lanchonete.domain.models import ItemCarrinho


def subtotal(itens: Iterable[ItemCarrinho]) -> float:
    """Σ quantidade × preço unitário."""
    return float(sum(i.quantidade * i.preco_unitario for i in itens))


def desconto(valor_subtotal: float, desconto_percentual: Optional[float]) -> float:
    """Desconto em valor; 0 quando não há percentual."""
    if not desconto_percentual:
        return 0.0
    return float(valor_subtotal) * float(desconto_percentual) / 100.0


def total(valor_subtotal: float, valor_desconto: float) -> float:
    return float(valor_subtotal) - float(valor_desconto)


def pontos_ganhos(valor_total: float, reais_por_ponto: float = 10.0) -> int:
    """1 ponto a cada ``reais_por_ponto`` gastos (arredondado para baixo)."""
    if valor_total <= 0:
        return 0
    # tolerância contra ruído de ponto flutuante (ex.: 29.999999999)
    return int(floor(float(valor_total) / float(reais_por_ponto) + 1e-9))
