import asyncio
from unittest.mock import AsyncMock, MagicMock

import openai

from lanchonete.domain.models import Fornecedor, ItemCarrinho, Produto, Venda
from lanchonete.infra import assistente


def _resposta(conteudo):
    resp = MagicMock()
    resp.choices[0].message.content = conteudo
    return resp


def _client(conteudo=None, erro=None, atraso=0.0):
    async def create(**kwargs):
        if atraso:
            await asyncio.sleep(atraso)
        if erro:
            raise erro
        return _resposta(conteudo)

    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=create)
    return client


def _dados():
    produtos = [
        Produto(id="pao", nome="Pão", estoque=2, estoque_minimo=10, fornecedor_id="f1"),
        Produto(id="coca", nome="Coca", estoque=50, estoque_minimo=10, fornecedor_id="f2"),
    ]
    vendas = [Venda(id="v1", data="2026-10-18", itens=[ItemCarrinho("pao", "Pão", 1, 1.0)],
                    subtotal=1.0, total=1.0, forma_pagamento="cash")]
    return produtos, vendas


def test_prompts():
    produtos, vendas = _dados()
    texto = assistente.prompt_insight(produtos, vendas, [])
    assert "Pão (2)" in texto
    assert "Coca" not in texto

    sugestao = assistente.prompt_reposicao(produtos, Fornecedor(id="f1", nome="Padaria"))
    assert '"Padaria"' in sugestao
    assert "Pão" in sugestao and "Coca" not in sugestao


def test_insight_sem_chave(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    produtos, vendas = _dados()
    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [])) == assistente.ERRO_SEM_CHAVE
    assert asyncio.run(assistente.sugerir_reposicao(produtos, Fornecedor(id="f1", nome="P"))) == ""


def test_insight_com_resposta():
    produtos, vendas = _dados()
    client = _client(conteudo="  Repor pão hoje.  ")
    texto = asyncio.run(assistente.gerar_insight(produtos, vendas, [], client=client))
    assert texto == "Repor pão hoje."
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["messages"][0]["role"] == "user"
    assert kwargs["model"]


def test_insight_resposta_vazia():
    produtos, vendas = _dados()
    client = _client(conteudo="")
    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [], client=client)) == assistente.SEM_ANALISE


def test_insight_erro_de_api():
    produtos, vendas = _dados()
    client = _client(erro=openai.OpenAIError("falhou"))
    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [], client=client)) == assistente.ERRO_CONEXAO


def test_timeout():
    produtos, vendas = _dados()
    client = _client(conteudo="tarde demais", atraso=1.0)
    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [], client=client, timeout=0.01)) == assistente.ERRO_CONEXAO
    texto = asyncio.run(
        assistente.sugerir_reposicao(produtos, Fornecedor(id="f1", nome="P"), client=client, timeout=0.01)
    )
    assert texto == assistente.ERRO_SUGESTAO


def test_sugestao_erro_de_rede():
    produtos, _ = _dados()
    client = _client(erro=OSError("sem rede"))
    texto = asyncio.run(assistente.sugerir_reposicao(produtos, Fornecedor(id="f1", nome="P"), client=client))
    assert texto == assistente.ERRO_SUGESTAO


def test_client_criado_internamente_e_fechado(monkeypatch):
    produtos, vendas = _dados()
    client = _client(conteudo="ok")
    client.close = AsyncMock()
    monkeypatch.setattr(assistente, "get_client", lambda: client)

    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [])) == "ok"
    assert asyncio.run(assistente.sugerir_reposicao(produtos, Fornecedor(id="f1", nome="P"))) == "ok"
    assert client.close.await_count == 2


def test_client_injetado_nao_e_fechado():
    produtos, vendas = _dados()
    client = _client(erro=openai.OpenAIError("falhou"))
    client.close = AsyncMock()
    assert asyncio.run(assistente.gerar_insight(produtos, vendas, [], client=client)) == assistente.ERRO_CONEXAO
    client.close.assert_not_awaited()
