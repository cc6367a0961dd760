"""
Assistente de IA (consultoria de negócio e sugestão de pedido de compra).

As chamadas são assíncronas, com timeout, e nunca alteram o estado: o
resultado é apenas um texto para exibição. Qualquer falha (chave ausente,
rede, timeout) vira uma mensagem fixa.
"""

from __future__ import annotations

import asyncio
import json
import os
from typing import Iterable, Optional

import openai
from openai import AsyncOpenAI

from lanchonete.config import DEFAULTS
from lanchonete.domain.models import Compra, Fornecedor, Produto, Venda
from lanchonete.domain.policies import precisa_repor
from lanchonete.infra.logger import log_system_event


ERRO_SEM_CHAVE = "Erro: Chave de API não configurada."
ERRO_CONEXAO = "Erro ao conectar com o assistente IA. Verifique sua conexão ou chave de API."
ERRO_SUGESTAO = "Erro ao gerar sugestão."
SEM_ANALISE = "Não foi possível gerar uma análise no momento."


def get_client() -> Optional[AsyncOpenAI]:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        log_system_event("assistente_sem_chave", level="warning")
        return None
    return AsyncOpenAI(api_key=api_key)


def prompt_insight(produtos: Iterable[Produto], vendas: Iterable[Venda], compras: Iterable[Compra]) -> str:
    produtos = list(produtos)
    vendas = list(vendas)
    baixo = [
        f"{p.nome} ({p.estoque:g})"
        for p in produtos
        if p.is_insumo and precisa_repor(p.estoque, p.estoque_minimo)
    ]
    recentes = vendas[-10:]
    receita = sum(v.total for v in vendas)
    gasto = sum(c.total for c in compras)
    resumo_vendas = json.dumps(
        [{"total": v.total, "itens": [i.produto_nome for i in v.itens]} for v in recentes],
        ensure_ascii=False,
    )
    return (
        "Atue como um consultor sênior de negócios para uma lanchonete. Analise os dados abaixo "
        "e forneça um resumo executivo curto e estratégico (máximo 3 parágrafos).\n"
        "Foque em:\n"
        "1. Itens críticos que precisam de reposição (Estoque baixo).\n"
        "2. Tendências de vendas recentes.\n"
        "3. Sugestão de ação imediata (ex: promoção, compra, mudança de preço).\n\n"
        "Dados Atuais:\n"
        f"- Itens com estoque baixo/crítico: {', '.join(baixo) or 'Nenhum'}\n"
        f"- Receita total acumulada: R$ {receita:.2f}\n"
        f"- Total gasto em compras: R$ {gasto:.2f}\n"
        f"- Últimas {len(recentes)} vendas: {resumo_vendas}\n"
    )


def prompt_reposicao(produtos: Iterable[Produto], fornecedor: Fornecedor) -> str:
    do_fornecedor = [p for p in produtos if p.is_insumo and p.fornecedor_id == fornecedor.id]
    dados = json.dumps(
        [
            {"nome": p.nome, "estoque": p.estoque, "estoque_minimo": p.estoque_minimo, "custo": p.custo}
            for p in do_fornecedor
        ],
        ensure_ascii=False,
    )
    return (
        f'Crie uma sugestão de pedido de compra para o fornecedor "{fornecedor.nome}".\n'
        "Baseie-se nestes produtos que compramos dele e seus níveis atuais de estoque:\n"
        f"{dados}\n\n"
        "Retorne apenas uma lista formatada com os itens e quantidades sugeridas para atingir "
        "um nível seguro (estoque mínimo + 20%).\n"
        "Se o estoque estiver bom, diga que não é necessário comprar nada.\n"
    )


async def _completar(client: AsyncOpenAI, prompt: str, timeout: float) -> str:
    resp = await asyncio.wait_for(
        client.chat.completions.create(
            model=DEFAULTS.modelo_ia,
            messages=[{"role": "user", "content": prompt}],
        ),
        timeout=timeout,
    )
    return (resp.choices[0].message.content or "").strip()


async def gerar_insight(
    produtos: Iterable[Produto],
    vendas: Iterable[Venda],
    compras: Iterable[Compra],
    client: Optional[AsyncOpenAI] = None,
    timeout: float = DEFAULTS.timeout_ia_segundos,
) -> str:
    """Resumo executivo do negócio; nunca levanta exceção."""
    proprio = client is None
    client = client or get_client()
    if client is None:
        return ERRO_SEM_CHAVE
    try:
        texto = await _completar(client, prompt_insight(produtos, vendas, compras), timeout)
        return texto or SEM_ANALISE
    except (openai.OpenAIError, asyncio.TimeoutError, OSError) as e:
        log_system_event("assistente_insight_error", {"error": str(e) or type(e).__name__}, level="error")
        return ERRO_CONEXAO
    finally:
        if proprio:
            await client.close()


async def sugerir_reposicao(
    produtos: Iterable[Produto],
    fornecedor: Fornecedor,
    client: Optional[AsyncOpenAI] = None,
    timeout: float = DEFAULTS.timeout_ia_segundos,
) -> str:
    """Sugestão de pedido para um fornecedor; texto vazio se não houver chave."""
    proprio = client is None
    client = client or get_client()
    if client is None:
        return ""
    try:
        return await _completar(client, prompt_reposicao(produtos, fornecedor), timeout)
    except (openai.OpenAIError, asyncio.TimeoutError, OSError) as e:
        log_system_event("assistente_reposicao_error", {"error": str(e) or type(e).__name__}, level="error")
        return ERRO_SUGESTAO
    finally:
        if proprio:
            await client.close()
