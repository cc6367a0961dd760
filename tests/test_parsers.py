import pytest

from lanchonete.adapters.parsers import parse_item_raw, parse_numero, parse_receita_raw


@pytest.mark.parametrize(
    "txt,esperado",
    [("12,5", 12.5), ("12.5", 12.5), (" 3 ", 3.0), ("-1", -1.0), ("abc", None), ("", None), (None, None)],
)
def test_parse_numero(txt, esperado):
    assert parse_numero(txt) == esperado


@pytest.mark.parametrize(
    "txt,exp_id,exp_qtd,exp_preco",
    [
        ("xburger:2", "xburger", 2.0, None),
        ("coca:1@6,50", "coca", 1.0, 6.5),
        ("xburger", "xburger", 1.0, None),
        ("queijo:0,15", "queijo", 0.15, None),
        ("pao:abc", "pao", None, None),
        ("", None, None, None),
        (None, None, None, None),
    ],
)
def test_parse_item_raw(txt, exp_id, exp_qtd, exp_preco):
    produto_id, qtd, preco = parse_item_raw(txt)
    assert produto_id == exp_id
    assert qtd == exp_qtd
    assert preco == exp_preco


def test_parse_receita_raw():
    assert parse_receita_raw("pao:1;carne:0,15") == [("pao", 1.0), ("carne", 0.15)]
    assert parse_receita_raw("pao:1 | queijo:2;") == [("pao", 1.0), ("queijo", 2.0)]
    assert parse_receita_raw(None) == []
    assert parse_receita_raw("  ") == []


def test_parse_receita_raw_linha_invalida():
    with pytest.raises(ValueError):
        parse_receita_raw("pao:um")
