import pytest

from lanchonete.domain.errors import EstoqueInsuficienteError
from lanchonete.domain.models import ItemCarrinho, ItemReceita, Produto
from lanchonete.usecases.movimentacao import aplicar_baixa_venda, aplicar_compra, consumo_insumos


def _catalogo():
    return [
        Produto(id="pao", nome="Pão", estoque=10),
        Produto(id="carne", nome="Carne", estoque=5),
        Produto(id="coca", nome="Coca", estoque=12, preco=6.0),
        Produto(
            id="xburger", nome="X-Burger", tipo="prato", preco=20.0,
            receita=[ItemReceita("pao", 1), ItemReceita("carne", 1)],
        ),
    ]


def _estoques(produtos):
    return {p.id: p.estoque for p in produtos}


def test_baixa_de_prato_consome_receita():
    produtos = _catalogo()
    novos = aplicar_baixa_venda(produtos, [ItemCarrinho("xburger", "X-Burger", 2, 20.0)])
    assert _estoques(novos) == {"pao": 8, "carne": 3, "coca": 12, "xburger": 0}


def test_baixa_nao_altera_lista_original():
    produtos = _catalogo()
    aplicar_baixa_venda(produtos, [ItemCarrinho("coca", "Coca", 3, 6.0)])
    assert _estoques(produtos)["coca"] == 12


def test_insumo_vendido_diretamente():
    novos = aplicar_baixa_venda(_catalogo(), [ItemCarrinho("coca", "Coca", 3, 6.0)])
    assert _estoques(novos)["coca"] == 9


def test_produto_desconhecido_ignorado():
    produtos = _catalogo()
    novos = aplicar_baixa_venda(produtos, [ItemCarrinho("fantasma", "?", 1, 1.0)])
    assert _estoques(novos) == _estoques(produtos)


def test_venda_acima_do_estoque_deixa_negativo():
    novos = aplicar_baixa_venda(_catalogo(), [ItemCarrinho("xburger", "X-Burger", 7, 20.0)])
    assert _estoques(novos)["carne"] == -2


def test_bloqueio_opcional_de_estoque_negativo():
    with pytest.raises(EstoqueInsuficienteError) as exc:
        aplicar_baixa_venda(_catalogo(), [ItemCarrinho("xburger", "X-Burger", 7, 20.0)], bloquear_estoque_negativo=True)
    assert exc.value.faltantes == {"carne": 2}


def test_consumo_agrega_linhas():
    consumo = consumo_insumos(_catalogo(), [
        ItemCarrinho("xburger", "X-Burger", 2, 20.0),
        ItemCarrinho("pao", "Pão", 1, 1.0),
    ])
    assert consumo == {"pao": 3, "carne": 2}


def test_compra_soma_estoque():
    novos = aplicar_compra(_catalogo(), [ItemCarrinho("pao", "Pão", 20, 0.5), ItemCarrinho("fantasma", "?", 1, 1.0)])
    assert _estoques(novos) == {"pao": 30, "carne": 5, "coca": 12, "xburger": 0}
