import pytest

from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import EstadoApp, ItemReceita, Produto
from lanchonete.usecases.catalogo import (
    atualizar_cliente,
    atualizar_estoque_minimo,
    cadastrar_cliente,
    cadastrar_fornecedor,
    cadastrar_produto,
    excluir_cliente,
    propor_exclusao_cliente,
)


def _com_insumo():
    estado, _ = cadastrar_produto(EstadoApp(), Produto(id="pao", nome=" Pão ", estoque=10))
    return estado


def test_cadastrar_insumo_e_prato():
    estado = _com_insumo()
    assert estado.produto("pao").nome == "Pão"

    estado, prato = cadastrar_produto(estado, Produto(
        id="", nome="Torrada", tipo="prato", preco=8.0, estoque=99,
        receita=[ItemReceita("pao", 2)],
    ))
    assert prato.id
    assert prato.estoque == 0
    assert estado.produto(prato.id) == prato


def test_cadastrar_mesmo_id_substitui_na_posicao():
    estado = _com_insumo()
    estado, _ = cadastrar_produto(estado, Produto(id="queijo", nome="Queijo"))
    estado, _ = cadastrar_produto(estado, Produto(id="pao", nome="Pão Francês", estoque=3))
    assert [p.id for p in estado.produtos] == ["pao", "queijo"]
    assert estado.produto("pao").nome == "Pão Francês"


@pytest.mark.parametrize(
    "produto",
    [
        Produto(id="x", nome=""),
        Produto(id="x", nome="X", tipo="combo"),
        Produto(id="x", nome="X", unidade="caixa"),
        Produto(id="x", nome="X", preco=-1),
        Produto(id="x", nome="X", receita=[ItemReceita("pao", 1)]),
        Produto(id="x", nome="X", tipo="prato", receita=[ItemReceita("fantasma", 1)]),
        Produto(id="x", nome="X", tipo="prato", receita=[ItemReceita("pao", 0)]),
    ],
)
def test_produto_invalido(produto):
    with pytest.raises(ValidacaoError):
        cadastrar_produto(_com_insumo(), produto)


def test_receita_nao_aceita_prato_como_ingrediente():
    estado, _ = cadastrar_produto(_com_insumo(), Produto(id="t", nome="Torrada", tipo="prato", receita=[ItemReceita("pao", 1)]))
    with pytest.raises(ValidacaoError):
        cadastrar_produto(estado, Produto(id="c", nome="Combo", tipo="prato", receita=[ItemReceita("t", 1)]))


def test_insumo_usado_em_receita_nao_vira_prato():
    estado, _ = cadastrar_produto(_com_insumo(), Produto(id="x", nome="X", tipo="prato", receita=[ItemReceita("pao", 1)]))
    with pytest.raises(ValidacaoError, match="não pode virar prato"):
        cadastrar_produto(estado, Produto(id="pao", nome="Pão", tipo="prato"))
    assert estado.produto("pao").tipo == "insumo"

    # sem receita que o use, a troca de tipo é permitida
    estado, _ = cadastrar_produto(_com_insumo(), Produto(id="pao", nome="Pão", tipo="prato"))
    assert estado.produto("pao").tipo == "prato"


def test_atualizar_estoque_minimo():
    estado = atualizar_estoque_minimo(_com_insumo(), "pao", 4)
    assert estado.produto("pao").estoque_minimo == 4
    with pytest.raises(ValidacaoError):
        atualizar_estoque_minimo(estado, "pao", -1)


def test_fornecedor_id_duplicado():
    estado, f = cadastrar_fornecedor(EstadoApp(), "Padaria", fornecedor_id="f1")
    assert f.id == "f1"
    with pytest.raises(ValidacaoError):
        cadastrar_fornecedor(estado, "Outra", fornecedor_id="f1")


def test_atualizar_cliente_nao_mexe_em_pontos():
    estado, cliente = cadastrar_cliente(EstadoApp(), "Ana")
    estado = atualizar_cliente(estado, cliente.id, {"sobrenome": "Souza", "fone": "11 99999-0000"})
    assert estado.cliente(cliente.id).nome_completo == "Ana Souza"
    with pytest.raises(ValidacaoError):
        atualizar_cliente(estado, cliente.id, {"pontos_fidelidade": 999})


def test_exclusao_de_cliente_em_duas_fases():
    estado, cliente = cadastrar_cliente(EstadoApp(), "Ana")
    token = propor_exclusao_cliente(estado, cliente.id)

    with pytest.raises(ValidacaoError):
        excluir_cliente(estado, cliente.id, "errado")
    assert estado.cliente(cliente.id) is not None

    estado = excluir_cliente(estado, cliente.id, token)
    assert estado.clientes == []


def test_token_expira_quando_cliente_muda():
    estado, cliente = cadastrar_cliente(EstadoApp(), "Ana")
    token = propor_exclusao_cliente(estado, cliente.id)
    estado.clientes[0].pontos_fidelidade = 10
    with pytest.raises(ValidacaoError):
        excluir_cliente(estado, cliente.id, token)
