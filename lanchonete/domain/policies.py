"""
Políticas de classificação de estoque, reposição e fidelidade.

Este módulo contém funções que encapsulam regras de negócio de
classificação de status de insumos, sugestão de quantidade de reposição
para a lista de compras e a tabela de recompensas do programa de
fidelidade. As funções são utilizadas pela camada de aplicação ao montar
relatórios, preencher a lista de compras e aplicar descontos na venda.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def status_estoque(estoque: Optional[float], estoque_minimo: Optional[float]) -> str:
    """Classifica o status do estoque de um insumo.

    Regras:
        - Se algum dos parâmetros for ``None``, retorna ``'VERIFICAR'``.
        - ``estoque <= 0`` → ``'CRITICO'`` (inclui estoque negativo por
          venda acima do disponível)
        - ``estoque <= estoque_minimo`` → ``'BAIXO'``
        - caso contrário → ``'OK'``

    Args:
        estoque: Quantidade atual em estoque.
        estoque_minimo: Limite de reposição.

    Returns:
        ``'CRITICO'``, ``'BAIXO'``, ``'OK'`` ou ``'VERIFICAR'``.
    """
    try:
        esto = float(estoque) if estoque is not None else None
        minimo = float(estoque_minimo) if estoque_minimo is not None else None
    except (TypeError, ValueError):
        return "VERIFICAR"

    if esto is None or minimo is None:
        return "VERIFICAR"
    if esto <= 0:
        return "CRITICO"
    if esto <= minimo:
        return "BAIXO"
    return "OK"


def precisa_repor(estoque: float, estoque_minimo: float) -> bool:
    """Insumo entra na varredura de reposição quando ``estoque <= mínimo``."""
    return float(estoque) <= float(estoque_minimo)


def sugestao_reposicao(estoque: float, estoque_minimo: float, fator: float = 2.0) -> float:
    """Quantidade sugerida para repor um insumo.

    ``(estoque_minimo * fator) - estoque``. Pode ser zero ou negativa
    (quando o mínimo é 0, por exemplo); quem chama decide descartar.
    """
    return float(estoque_minimo) * float(fator) - float(estoque)


@dataclass(frozen=True)
class Recompensa:
    pontos: int
    desconto_percentual: float
    descricao: str


RECOMPENSAS: List[Recompensa] = [
    Recompensa(50, 5.0, "5% de desconto"),
    Recompensa(100, 10.0, "10% de desconto"),
    Recompensa(200, 15.0, "15% de desconto"),
    Recompensa(300, 20.0, "20% de desconto"),
]


def recompensas_disponiveis(pontos: int) -> List[Recompensa]:
    """Recompensas que o saldo de pontos permite resgatar."""
    return [r for r in RECOMPENSAS if pontos >= r.pontos]


def proxima_recompensa(pontos: int) -> Optional[Recompensa]:
    for r in RECOMPENSAS:
        if pontos < r.pontos:
            return r
    return None


def recompensa_por_pontos(pontos: int) -> Optional[Recompensa]:
    """Localiza a recompensa cujo custo é exatamente ``pontos``."""
    for r in RECOMPENSAS:
        if r.pontos == pontos:
            return r
    return None
