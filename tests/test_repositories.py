import sqlite3

from lanchonete.domain.models import (
    Cliente, Comanda, Compra, EstadoApp, Fornecedor, ItemCarrinho,
    ItemListaCompras, ItemReceita, Produto, Venda,
)
from lanchonete.infra.migrations import apply_migrations
from lanchonete.infra.repositories import EstadoRepo
from lanchonete.infra.serializers import estado_from_dict, estado_to_dict, produto_to_dict, venda_to_dict


def _estado():
    item = ItemCarrinho("xburger", "X-Burger", 1, 20.0)
    return EstadoApp(
        produtos=[
            Produto(id="pao", nome="Pão", estoque=8.5, estoque_minimo=10, custo=0.5, fornecedor_id="f1"),
            Produto(id="xburger", nome="X-Burger", tipo="prato", preco=20.0, categoria="Lanches",
                    receita=[ItemReceita("pao", 1)]),
        ],
        fornecedores=[Fornecedor(id="f1", nome="Padaria", email="p@x.com")],
        clientes=[Cliente(id="c1", nome="Ana", pontos_fidelidade=12, criado_em="2026-10-18T10:00:00")],
        vendas=[
            Venda(id="v1", data="2026-10-18T12:00:00", itens=[item], subtotal=20.0, total=18.0,
                  forma_pagamento="pix", desconto=2.0, desconto_percentual=10.0, pontos_usados=50,
                  pontos_ganhos=1, cliente_id="c1", cliente_nome="Ana"),
            Venda(id="v2", data="2026-10-18T13:00:00", itens=[item], subtotal=20.0, total=20.0,
                  forma_pagamento="cash", pontos_ganhos=2, cliente_nome="Mesa 1", comanda_id="m0"),
        ],
        compras=[Compra(id="k1", data="2026-10-18T08:00:00", fornecedor_id="f1",
                        itens=[ItemCarrinho("pao", "Pão", 10, 0.5)], total=5.0)],
        lista_compras=[ItemListaCompras(id="l1", produto_id="pao", quantidade=11.5)],
        comandas_ativas=[Comanda(id="m1", cliente_nome="Mesa 2", aberta_em="2026-10-18T20:00:00",
                                 itens=[item], total=20.0)],
    )


def test_migrations_idempotentes(tmp_path):
    db = str(tmp_path / "l.db")
    apply_migrations(db)
    apply_migrations(db)
    conn = sqlite3.connect(db)
    try:
        assert conn.execute("PRAGMA user_version").fetchone()[0] == 1
        cols = [r[1] for r in conn.execute("PRAGMA table_info(venda)")]
        assert "comanda_id" in cols
    finally:
        conn.close()


def test_estado_salvo_e_recarregado(tmp_path):
    repo = EstadoRepo(str(tmp_path / "l.db"))
    estado = _estado()
    repo.save(estado)
    assert EstadoRepo(str(tmp_path / "l.db")).load() == estado


def test_save_substitui_colecoes(tmp_path):
    repo = EstadoRepo(str(tmp_path / "l.db"))
    repo.save(_estado())
    repo.save(EstadoApp(produtos=[Produto(id="a", nome="A")]))
    carregado = repo.load()
    assert [p.id for p in carregado.produtos] == ["a"]
    assert carregado.vendas == []


def test_formato_persistido_camel_case():
    e = _estado()
    d = produto_to_dict(e.produtos[1])
    assert set(d) >= {"id", "name", "type", "price", "cost", "stock", "minStock", "unit", "category", "recipe"}
    assert "recipe" not in produto_to_dict(e.produtos[0])

    v = venda_to_dict(e.vendas[1])
    assert v["paymentMethod"] == "cash"
    assert v["comandaId"] == "m0"
    assert "customerId" not in v
    assert "discountPercent" not in v


def test_documento_sem_colecoes():
    assert estado_from_dict({}) == EstadoApp()
    assert estado_from_dict(estado_to_dict(_estado())) == _estado()
