import pytest

from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import EstadoApp, ItemReceita, Produto
from lanchonete.usecases.lista_compras import (
    adicionar_a_lista,
    preencher_estoque_baixo,
    processar_lista_para_compra,
    remover_da_lista,
)


def _estado():
    return EstadoApp(produtos=[
        Produto(id="a", nome="Insumo A", estoque=2, estoque_minimo=10, custo=1.5),
        Produto(id="b", nome="Insumo B", estoque=50, estoque_minimo=10, custo=3.0),
        Produto(id="c", nome="Insumo C", estoque=0, estoque_minimo=0),
        Produto(id="d", nome="Prato D", tipo="prato", preco=15.0, receita=[ItemReceita("a", 3)]),
    ])


def test_preencher_estoque_baixo_e_idempotente():
    estado, adicionados = preencher_estoque_baixo(_estado())
    assert [(i.produto_id, i.quantidade) for i in adicionados] == [("a", 18)]
    assert len(estado.lista_compras) == 1

    novo, adicionados = preencher_estoque_baixo(estado)
    assert adicionados == []
    assert novo is estado


def test_preencher_nao_sobrescreve_quantidade_manual():
    estado = adicionar_a_lista(_estado(), "a", 5)
    estado, adicionados = preencher_estoque_baixo(estado)
    assert adicionados == []
    assert [(i.produto_id, i.quantidade) for i in estado.lista_compras] == [("a", 5)]


def test_adicionar_acumula():
    estado = adicionar_a_lista(_estado(), "b", 4)
    estado = adicionar_a_lista(estado, "b", 6)
    assert len(estado.lista_compras) == 1
    assert estado.lista_compras[0].quantidade == 10


@pytest.mark.parametrize("produto_id,qtd", [("a", 0), ("a", -1), ("zzz", 1), ("d", 1)])
def test_adicionar_invalido(produto_id, qtd):
    with pytest.raises(ValidacaoError):
        adicionar_a_lista(_estado(), produto_id, qtd)


def test_processar_lista_para_compra():
    estado, _ = preencher_estoque_baixo(_estado())
    estado = adicionar_a_lista(estado, "b", 4)
    id_a = estado.lista_compras[0].id

    novo, compra = processar_lista_para_compra(estado, [id_a, "ignorado"], "f1")

    assert compra.fornecedor_id == "f1"
    assert compra.total == 27.0
    assert compra.itens[0].preco_unitario == 1.5
    assert novo.produto("a").estoque == 20
    assert [i.produto_id for i in novo.lista_compras] == ["b"]
    assert novo.compras == [compra]


def test_processar_sem_selecao():
    estado, _ = preencher_estoque_baixo(_estado())
    with pytest.raises(ValidacaoError):
        processar_lista_para_compra(estado, [], "f1")


def test_processar_sem_fornecedor_nao_altera():
    estado, _ = preencher_estoque_baixo(_estado())
    with pytest.raises(ValidacaoError):
        processar_lista_para_compra(estado, [estado.lista_compras[0].id], "")
    assert len(estado.lista_compras) == 1


def test_remover_da_lista():
    estado, adicionados = preencher_estoque_baixo(_estado())
    assert remover_da_lista(estado, [adicionados[0].id]).lista_compras == []
