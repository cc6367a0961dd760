"""
Relatórios gerenciais (dashboard) da lanchonete.

Este módulo reúne funções de alto nível para gerar relatórios a partir do
snapshot do estado. As funções retornam listas de dicionários (ou um
dicionário, no resumo e no histórico) prontas para exibição na CLI.

Relatórios disponíveis:
- resumo_financeiro: receita, compras, margem bruta, ticket médio.
- vendas_ultimos_dias: receita diária dos últimos N dias.
- top_produtos: produtos com maior receita.
- vendas_por_categoria / vendas_por_pagamento: receita agrupada.
- relatorio_estoque: status dos insumos e disponibilidade dos pratos.
- lucratividade: custo, preço, margem e lucro unitário por produto.
- historico_cliente: gasto, ticket médio e produtos favoritos de um cliente.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd

from lanchonete.domain.disponibilidade import disponibilidade
from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import EstadoApp, Produto
from lanchonete.domain.policies import precisa_repor, status_estoque
from lanchonete.infra.logger import log_system_event


NOMES_PAGAMENTO = {"cash": "Dinheiro", "card": "Cartão", "pix": "PIX", "credit": "Crédito"}

_ORDEM_STATUS = {"CRITICO": 0, "BAIXO": 1, "OK": 2, "VERIFICAR": 3}


def _df_itens_vendidos(estado: EstadoApp) -> pd.DataFrame:
    """Uma linha por item vendido, com a categoria atual do produto."""
    categorias = {p.id: p.categoria for p in estado.produtos}
    linhas = [
        {
            "produto_id": item.produto_id,
            "produto_nome": item.produto_nome,
            "categoria": categorias.get(item.produto_id) or "Outros",
            "quantidade": float(item.quantidade),
            "receita": float(item.quantidade * item.preco_unitario),
        }
        for venda in estado.vendas
        for item in venda.itens
    ]
    return pd.DataFrame(linhas, columns=["produto_id", "produto_nome", "categoria", "quantidade", "receita"])


def _df_vendas(estado: EstadoApp) -> pd.DataFrame:
    linhas = [
        {"data": v.data[:10], "forma_pagamento": v.forma_pagamento, "total": float(v.total)}
        for v in estado.vendas
    ]
    return pd.DataFrame(linhas, columns=["data", "forma_pagamento", "total"])


def resumo_financeiro(estado: EstadoApp) -> Dict[str, Any]:
    total_vendas = float(sum(v.total for v in estado.vendas))
    total_compras = float(sum(c.total for c in estado.compras))
    qtd_vendas = len(estado.vendas)
    estoque_baixo = sum(
        1 for p in estado.produtos if p.is_insumo and precisa_repor(p.estoque, p.estoque_minimo)
    )
    return {
        "total_vendas": round(total_vendas, 2),
        "total_compras": round(total_compras, 2),
        "margem_bruta": round(total_vendas - total_compras, 2),
        "qtd_vendas": qtd_vendas,
        "ticket_medio": round(total_vendas / qtd_vendas, 2) if qtd_vendas else 0.0,
        "insumos_estoque_baixo": estoque_baixo,
        "comandas_abertas": len(estado.comandas_ativas),
    }


def vendas_ultimos_dias(estado: EstadoApp, dias: int = 7, hoje: Optional[date] = None) -> List[Dict[str, Any]]:
    """Receita por dia (inclusive dias sem venda) dos últimos ``dias`` dias."""
    hoje = hoje or date.today()
    datas = [(hoje - timedelta(days=i)).isoformat() for i in range(dias - 1, -1, -1)]
    df = _df_vendas(estado)
    por_dia = df.groupby("data")["total"].sum() if not df.empty else pd.Series(dtype=float)
    return [{"data": d, "total": round(float(por_dia.get(d, 0.0)), 2)} for d in datas]


def top_produtos(estado: EstadoApp, n: int = 5) -> List[Dict[str, Any]]:
    df = _df_itens_vendidos(estado)
    if df.empty:
        return []
    agg = (
        df.groupby("produto_id", sort=False)
        .agg(nome=("produto_nome", "first"), quantidade=("quantidade", "sum"), receita=("receita", "sum"))
        .sort_values("receita", ascending=False, kind="stable")
        .head(n)
        .reset_index()
    )
    return [
        {
            "produto_id": r.produto_id,
            "nome": r.nome,
            "quantidade": float(r.quantidade),
            "receita": round(float(r.receita), 2),
        }
        for r in agg.itertuples(index=False)
    ]


def vendas_por_categoria(estado: EstadoApp) -> List[Dict[str, Any]]:
    df = _df_itens_vendidos(estado)
    if df.empty:
        return []
    agg = df.groupby("categoria", sort=True)["receita"].sum()
    return [{"categoria": cat, "receita": round(float(v), 2)} for cat, v in agg.items()]


def vendas_por_pagamento(estado: EstadoApp) -> List[Dict[str, Any]]:
    """Receita por forma de pagamento (formas sem movimento são omitidas)."""
    df = _df_vendas(estado)
    if df.empty:
        return []
    agg = df.groupby("forma_pagamento")["total"].sum()
    out = []
    for forma in NOMES_PAGAMENTO:
        valor = float(agg.get(forma, 0.0))
        if valor > 0:
            out.append({"forma_pagamento": NOMES_PAGAMENTO[forma], "total": round(valor, 2)})
    return out


def relatorio_estoque(estado: EstadoApp, apenas_alertas: bool = False) -> List[Dict[str, Any]]:
    """Status dos insumos e disponibilidade dos pratos.

    Insumos com estoque negativo (venda acima do disponível) aparecem como
    ``CRITICO``. Pratos trazem ``disponivel`` calculado pela receita e
    status ``CRITICO`` quando não podem ser montados.
    """
    disp = disponibilidade(estado.produtos)
    out: List[Dict[str, Any]] = []
    for p in estado.produtos:
        if p.is_insumo:
            status = status_estoque(p.estoque, p.estoque_minimo)
            estoque: Optional[float] = float(p.estoque)
        else:
            status = "OK" if disp[p.id] > 0 else "CRITICO"
            estoque = None
        if apenas_alertas and status == "OK":
            continue
        out.append({
            "produto_id": p.id,
            "nome": p.nome,
            "tipo": p.tipo,
            "estoque": estoque,
            "estoque_minimo": float(p.estoque_minimo) if p.is_insumo else None,
            "disponivel": disp[p.id],
            "unidade": p.unidade,
            "status": status,
        })
    out.sort(key=lambda r: (_ORDEM_STATUS.get(r["status"], 9), r["tipo"], r["nome"]))
    log_system_event("relatorio_estoque", {"linhas": len(out), "apenas_alertas": apenas_alertas})
    return out


def custo_unitario(estado: EstadoApp, produto: Produto) -> float:
    """Custo do insumo, ou soma dos custos dos insumos da receita do prato."""
    if produto.is_insumo:
        return float(produto.custo)
    total = 0.0
    for linha in produto.receita:
        ingrediente = estado.produto(linha.ingrediente_id)
        if ingrediente is not None:
            total += float(ingrediente.custo) * float(linha.quantidade)
    return total


def lucratividade(estado: EstadoApp) -> List[Dict[str, Any]]:
    """Margem (% sobre o preço) e lucro unitário dos produtos à venda.

    Só entram produtos com preço de venda; a ordem é da maior margem para a
    menor.
    """
    linhas = [
        {
            "produto_id": p.id,
            "nome": p.nome,
            "tipo": p.tipo,
            "custo": custo_unitario(estado, p),
            "preco": float(p.preco),
        }
        for p in estado.produtos
        if p.preco > 0
    ]
    df = pd.DataFrame(linhas, columns=["produto_id", "nome", "tipo", "custo", "preco"])
    if df.empty:
        return []
    df["lucro_unitario"] = df["preco"] - df["custo"]
    df["margem"] = df["lucro_unitario"] / df["preco"] * 100
    df = df.sort_values("margem", ascending=False, kind="stable")
    return [
        {
            "produto_id": r.produto_id,
            "nome": r.nome,
            "tipo": r.tipo,
            "custo": round(float(r.custo), 2),
            "preco": round(float(r.preco), 2),
            "margem": round(float(r.margem), 1),
            "lucro_unitario": round(float(r.lucro_unitario), 2),
        }
        for r in df.itertuples(index=False)
    ]


def historico_cliente(estado: EstadoApp, cliente_id: str, n_favoritos: int = 3) -> Dict[str, Any]:
    """Compras de um cliente: totais, favoritos e vendas (mais recente primeiro).

    Uma venda é do cliente quando traz o id dele ou, sem id, o mesmo nome
    completo (comandas fechadas com o nome do cliente).
    """
    cliente = estado.cliente(cliente_id)
    if cliente is None:
        raise ValidacaoError(f"Cliente não encontrado: {cliente_id}")
    nome = cliente.nome_completo.lower()
    vendas = sorted(
        (
            v for v in estado.vendas
            if v.cliente_id == cliente.id or (v.cliente_nome or "").strip().lower() == nome
        ),
        key=lambda v: v.data,
        reverse=True,
    )
    total = float(sum(v.total for v in vendas))

    itens = pd.DataFrame(
        [
            {
                "produto_id": i.produto_id,
                "nome": i.produto_nome,
                "quantidade": float(i.quantidade),
                "total": float(i.quantidade * i.preco_unitario),
            }
            for v in vendas
            for i in v.itens
        ],
        columns=["produto_id", "nome", "quantidade", "total"],
    )
    favoritos: List[Dict[str, Any]] = []
    if not itens.empty:
        agg = (
            itens.groupby("produto_id", sort=False)
            .agg(nome=("nome", "first"), quantidade=("quantidade", "sum"), total=("total", "sum"))
            .sort_values("quantidade", ascending=False, kind="stable")
            .head(n_favoritos)
        )
        favoritos = [
            {"nome": r.nome, "quantidade": float(r.quantidade), "total": round(float(r.total), 2)}
            for r in agg.itertuples(index=False)
        ]

    return {
        "cliente": cliente.nome_completo,
        "total_gasto": round(total, 2),
        "compras": len(vendas),
        "ticket_medio": round(total / len(vendas), 2) if vendas else 0.0,
        "pontos_fidelidade": cliente.pontos_fidelidade,
        "favoritos": favoritos,
        "vendas": [
            {"venda": v.id, "data": v.data, "itens": len(v.itens), "pagamento": v.forma_pagamento, "total": float(v.total)}
            for v in vendas
        ],
    }
