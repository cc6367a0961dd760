import pytest

from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import EstadoApp, ItemCarrinho, ItemReceita, Produto
from lanchonete.usecases.comandas import abrir_comanda, atualizar_comanda, fechar_comanda


def _estado():
    return EstadoApp(produtos=[
        Produto(id="a", nome="Insumo A", estoque=10),
        Produto(id="d", nome="Prato D", tipo="prato", preco=15.0, receita=[ItemReceita("a", 3)]),
    ])


def test_ciclo_completo_da_comanda():
    estado, comanda_id = abrir_comanda(_estado(), "Mesa 1")
    comanda = estado.comanda(comanda_id)
    assert comanda.cliente_nome == "Mesa 1"
    assert comanda.itens == []
    assert comanda.total == 0

    estado = atualizar_comanda(estado, comanda_id, [ItemCarrinho("d", "Prato D", 1, 15.0)])
    assert estado.comanda(comanda_id).total == 15.0
    # salvar não mexe no estoque
    assert estado.produto("a").estoque == 10

    estado, venda = fechar_comanda(estado, comanda_id, "card")
    assert venda.total == 15.0
    assert venda.cliente_nome == "Mesa 1"
    assert venda.comanda_id == comanda_id
    assert estado.comanda(comanda_id) is None
    assert estado.comandas_ativas == []
    assert estado.produto("a").estoque == 7


def test_fechar_duas_vezes_gera_uma_venda():
    estado, comanda_id = abrir_comanda(_estado(), "Mesa 2")
    estado = atualizar_comanda(estado, comanda_id, [ItemCarrinho("d", "Prato D", 1, 15.0)])
    estado, _ = fechar_comanda(estado, comanda_id, "cash")
    novo, venda = fechar_comanda(estado, comanda_id, "cash")
    assert venda is None
    assert novo is estado
    assert len(novo.vendas) == 1


def test_atualizar_comanda_inexistente_e_noop():
    estado = _estado()
    assert atualizar_comanda(estado, "nao-existe", [ItemCarrinho("d", "D", 1, 15.0)]) is estado


def test_salvar_comanda_vazia_e_permitido():
    estado, comanda_id = abrir_comanda(_estado(), "Mesa 3")
    estado = atualizar_comanda(estado, comanda_id, [ItemCarrinho("d", "Prato D", 2, 15.0)])
    estado = atualizar_comanda(estado, comanda_id, [])
    assert estado.comanda(comanda_id).total == 0


def test_fechar_comanda_vazia_e_recusado():
    estado, comanda_id = abrir_comanda(_estado(), "Mesa 4")
    with pytest.raises(ValidacaoError):
        fechar_comanda(estado, comanda_id, "cash")
    assert estado.comanda(comanda_id) is not None


def test_abrir_sem_nome():
    with pytest.raises(ValidacaoError):
        abrir_comanda(_estado(), "  ")
