"""
Cálculo de disponibilidade de produtos a partir do estoque de insumos.

Um insumo está disponível na quantidade do seu próprio estoque. Um prato
pode ser montado tantas vezes quanto o seu insumo mais escasso permitir:
o resultado é o mínimo, sobre as linhas da receita, de
``floor(estoque_insumo / quantidade_por_unidade)``.

As funções são puras e devem ser chamadas a cada leitura: o estoque dos
insumos muda a cada venda e compra, então nada aqui é guardado em cache.
"""

from __future__ import annotations

from math import floor
from typing import Dict, Iterable, Optional

from lanchonete.domain.models import Produto
from lanchonete.infra.logger import log_system_event


def _indexa(produtos: Iterable[Produto]) -> Dict[str, Produto]:
    return {p.id: p for p in produtos}


def max_produzivel(produto: Produto, produtos: Iterable[Produto]) -> int:
    """Quantidade máxima vendável de ``produto`` com o estoque atual.

    Regras:
        - insumo → o próprio estoque (arredondado para baixo);
        - prato sem receita → 0 (prato não montável, não é erro);
        - prato com receita → mínimo de ``floor(estoque / qtd)`` entre as
          linhas cujo insumo existe no catálogo. Linhas com insumo
          desconhecido não restringem e geram um aviso de integridade.
          Se nenhuma linha for resolvida, retorna 0.

    O resultado nunca é negativo, mesmo quando o estoque de algum insumo
    ficou negativo por venda acima do disponível.
    """
    if produto.is_insumo:
        return max(0, floor(produto.estoque))
    if not produto.receita:
        return 0

    por_id = produtos if isinstance(produtos, dict) else _indexa(produtos)
    maximo: Optional[int] = None

    for linha in produto.receita:
        ingrediente = por_id.get(linha.ingrediente_id)
        if ingrediente is None:
            log_system_event(
                "receita_ingrediente_inexistente",
                {"prato": produto.id, "ingrediente_id": linha.ingrediente_id},
                level="warning",
            )
            continue
        if linha.quantidade <= 0:
            log_system_event(
                "receita_quantidade_invalida",
                {"prato": produto.id, "ingrediente_id": linha.ingrediente_id, "quantidade": linha.quantidade},
                level="warning",
            )
            continue
        possivel = floor(ingrediente.estoque / linha.quantidade)
        if maximo is None or possivel < maximo:
            maximo = possivel

    if maximo is None:
        return 0
    return max(0, maximo)


def disponibilidade(produtos: Iterable[Produto]) -> Dict[str, int]:
    """Mapa ``produto_id -> max_produzivel`` para todo o catálogo."""
    por_id = _indexa(produtos)
    return {pid: max_produzivel(p, por_id) for pid, p in por_id.items()}
