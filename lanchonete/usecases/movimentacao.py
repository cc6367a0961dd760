"""
UC: Movimentação de estoque (entradas por compra e baixas por venda).

- aplicar_compra(): soma as quantidades compradas ao estoque dos produtos.
- aplicar_baixa_venda(): baixa os insumos consumidos por uma venda.

Obs.:
- As funções recebem a lista de produtos do snapshot atual e devolvem uma
  NOVA lista; os objetos de entrada não são alterados. Quem chama adota a
  lista nova inteira ou nenhuma, então o restante do sistema nunca enxerga
  um estoque parcialmente atualizado.
- Produtos desconhecidos nas linhas são ignorados (dados antigos não
  bloqueiam a operação).
- Estoque negativo é permitido: sinaliza venda acima do disponível e
  aparece no relatório de estoque. O bloqueio só ocorre com
  `bloquear_estoque_negativo=True`.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List

from lanchonete.domain.errors import EstoqueInsuficienteError
from lanchonete.domain.models import ItemCarrinho, Produto
from lanchonete.infra.logger import log_system_event


def _copia(produtos: Iterable[Produto]) -> Dict[str, Produto]:
    # dict preserva a ordem do catálogo
    return {p.id: replace(p) for p in produtos}


def consumo_insumos(produtos: Iterable[Produto], itens: Iterable[ItemCarrinho]) -> Dict[str, float]:
    """Quanto de cada insumo uma venda consome (``insumo_id -> quantidade``)."""
    por_id = {p.id: p for p in produtos}
    consumo: Dict[str, float] = defaultdict(float)
    for item in itens:
        vendido = por_id.get(item.produto_id)
        if vendido is None:
            log_system_event("venda_produto_inexistente", {"produto_id": item.produto_id}, level="warning")
            continue
        if vendido.is_prato:
            for linha in vendido.receita:
                if linha.ingrediente_id not in por_id:
                    log_system_event(
                        "receita_ingrediente_inexistente",
                        {"prato": vendido.id, "ingrediente_id": linha.ingrediente_id},
                        level="warning",
                    )
                    continue
                consumo[linha.ingrediente_id] += linha.quantidade * item.quantidade
        elif vendido.is_insumo:
            consumo[vendido.id] += item.quantidade
    return dict(consumo)


def verificar_estoque_suficiente(produtos: Iterable[Produto], itens: Iterable[ItemCarrinho]) -> None:
    """Pré-checagem opcional: levanta erro se algum insumo ficaria negativo."""
    produtos = list(produtos)
    por_id = {p.id: p for p in produtos}
    faltantes = {
        insumo_id: qtd - por_id[insumo_id].estoque
        for insumo_id, qtd in consumo_insumos(produtos, itens).items()
        if por_id[insumo_id].estoque - qtd < 0
    }
    if faltantes:
        raise EstoqueInsuficienteError(faltantes)


def aplicar_compra(produtos: Iterable[Produto], itens: Iterable[ItemCarrinho]) -> List[Produto]:
    """Entrada de estoque: ``estoque[produto_id] += quantidade`` por linha."""
    novos = _copia(produtos)
    for item in itens:
        produto = novos.get(item.produto_id)
        if produto is None:
            log_system_event("compra_produto_inexistente", {"produto_id": item.produto_id}, level="warning")
            continue
        produto.estoque += item.quantidade
    return list(novos.values())


def aplicar_baixa_venda(
    produtos: Iterable[Produto],
    itens: Iterable[ItemCarrinho],
    bloquear_estoque_negativo: bool = False,
) -> List[Produto]:
    """Baixa de estoque de uma venda.

    Prato: cada insumo da receita perde ``qtd_receita * qtd_vendida``.
    Insumo vendido diretamente: perde ``qtd_vendida``.
    """
    produtos = list(produtos)
    itens = list(itens)
    if bloquear_estoque_negativo:
        verificar_estoque_suficiente(produtos, itens)

    novos = _copia(produtos)
    for insumo_id, qtd in consumo_insumos(produtos, itens).items():
        produto = novos[insumo_id]
        produto.estoque -= qtd
        if produto.estoque < 0:
            log_system_event(
                "estoque_negativo",
                {"produto_id": insumo_id, "estoque": produto.estoque},
                level="warning",
            )
    return list(novos.values())
