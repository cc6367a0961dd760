import pytest

from lanchonete.domain.errors import PermissaoNegadaError, ValidacaoError
from lanchonete.domain.models import ItemCarrinho, ItemReceita, Produto
from lanchonete.infra.repositories import EstadoRepo
from lanchonete.usecases.lanchonete import Lanchonete


def _loja(tmp_path, perfil=None):
    loja = Lanchonete.abrir(str(tmp_path / "l.db"), perfil=perfil)
    loja.cadastrar_produto(Produto(id="a", nome="Insumo A", estoque=10, estoque_minimo=10, custo=1.0))
    loja.cadastrar_produto(Produto(id="d", nome="Prato D", tipo="prato", preco=15.0, receita=[ItemReceita("a", 3)]))
    return loja


def test_venda_persistida_e_disponibilidade(tmp_path):
    loja = _loja(tmp_path)
    assert loja.max_produzivel("d") == 3

    loja.registrar_venda([ItemCarrinho("d", "Prato D", 2, 15.0)], "cash")
    assert loja.max_produzivel("d") == 1
    assert loja.max_produzivel("nao-existe") == 0

    recarregada = Lanchonete.abrir(str(tmp_path / "l.db"))
    assert recarregada.estado.produto("a").estoque == 4
    assert len(recarregada.estado.vendas) == 1


def test_cardapio(tmp_path):
    cardapio = dict((p.id, n) for p, n in _loja(tmp_path).cardapio())
    assert cardapio == {"d": 3}


def test_fluxo_comanda(tmp_path):
    loja = _loja(tmp_path)
    comanda_id = loja.abrir_comanda("Mesa 1")
    comanda = loja.atualizar_comanda(comanda_id, [ItemCarrinho("d", "Prato D", 1, 15.0)])
    assert comanda.total == 15.0
    assert loja.atualizar_comanda("nao-existe", []) is None

    venda = loja.fechar_comanda(comanda_id, "card")
    assert venda.cliente_nome == "Mesa 1"
    assert loja.estado.comandas_ativas == []
    assert loja.fechar_comanda(comanda_id, "card") is None
    assert len(EstadoRepo(str(tmp_path / "l.db")).load().vendas) == 1


def test_fluxo_lista_de_compras(tmp_path):
    loja = _loja(tmp_path)
    adicionados = loja.preencher_estoque_baixo()
    assert [(i.produto_id, i.quantidade) for i in adicionados] == [("a", 10)]
    assert loja.preencher_estoque_baixo() == []

    f = loja.cadastrar_fornecedor("Atacadão", fornecedor_id="f1")
    compra = loja.processar_lista_para_compra([adicionados[0].id], f.id)
    assert compra.total == 10.0
    assert loja.estado.produto("a").estoque == 20
    assert loja.estado.lista_compras == []


def test_importar_produtos_cadastra_insumos_antes(tmp_path):
    loja = Lanchonete.abrir(str(tmp_path / "l.db"))
    n = loja.importar_produtos([
        Produto(id="d", nome="Prato D", tipo="prato", receita=[ItemReceita("a", 1)]),
        Produto(id="a", nome="Insumo A", estoque=2),
    ])
    assert n == 2
    assert loja.max_produzivel("d") == 2


def test_importar_produtos_tudo_ou_nada(tmp_path):
    loja = Lanchonete.abrir(str(tmp_path / "l.db"))
    with pytest.raises(ValidacaoError):
        loja.importar_produtos([
            Produto(id="a", nome="Insumo A"),
            Produto(id="d", nome="Prato D", tipo="prato", receita=[ItemReceita("fantasma", 1)]),
        ])
    assert loja.estado.produtos == []


def test_falha_de_persistencia_nao_desfaz_estado(tmp_path, monkeypatch):
    loja = _loja(tmp_path)

    def falha(_estado):
        raise OSError("disco cheio")

    monkeypatch.setattr(loja.repo, "save", falha)
    venda = loja.registrar_venda([ItemCarrinho("a", "Insumo A", 1, 2.0)], "cash")
    assert loja.estado.vendas == [venda]
    assert loja.estado.produto("a").estoque == 9


def test_erro_de_validacao_nao_publica(tmp_path):
    loja = _loja(tmp_path)
    antes = loja.estado
    with pytest.raises(ValidacaoError):
        loja.registrar_venda([], "cash")
    assert loja.estado is antes


def test_permissoes_por_perfil(tmp_path):
    _loja(tmp_path)
    caixa = Lanchonete.abrir(str(tmp_path / "l.db"), perfil="caixa")
    caixa.registrar_venda([ItemCarrinho("d", "Prato D", 1, 15.0)], "pix")
    with pytest.raises(PermissaoNegadaError):
        caixa.registrar_compra("f1", [ItemCarrinho("a", "Insumo A", 1, 1.0)])
    with pytest.raises(PermissaoNegadaError):
        caixa.cadastrar_produto(Produto(id="x", nome="X"))

    operador = Lanchonete.abrir(str(tmp_path / "l.db"), perfil="operador")
    cliente = operador.cadastrar_cliente("Ana")
    with pytest.raises(PermissaoNegadaError):
        operador.propor_exclusao_cliente(cliente.id)

    admin = Lanchonete.abrir(str(tmp_path / "l.db"), perfil="admin")
    admin.excluir_cliente(cliente.id, admin.propor_exclusao_cliente(cliente.id))
    assert admin.estado.clientes == []


def test_perfil_desconhecido_nao_tem_permissao(tmp_path):
    loja = Lanchonete.abrir(str(tmp_path / "l.db"), perfil="visitante")
    with pytest.raises(PermissaoNegadaError):
        loja.abrir_comanda("Mesa 1")
