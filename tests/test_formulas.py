import pytest

from lanchonete.domain import formulas
from lanchonete.domain.models import ItemCarrinho
from lanchonete.domain.policies import (
    RECOMPENSAS,
    precisa_repor,
    proxima_recompensa,
    recompensa_por_pontos,
    recompensas_disponiveis,
    status_estoque,
    sugestao_reposicao,
)


def test_subtotal_desconto_total():
    itens = [ItemCarrinho("a", "A", 2, 10.0), ItemCarrinho("b", "B", 1, 5.5)]
    sub = formulas.subtotal(itens)
    assert sub == pytest.approx(25.5)
    desc = formulas.desconto(sub, 10)
    assert desc == pytest.approx(2.55)
    assert formulas.total(sub, desc) == pytest.approx(22.95)


def test_desconto_ausente_e_zero():
    assert formulas.desconto(100.0, None) == 0.0
    assert formulas.desconto(100.0, 0) == 0.0


@pytest.mark.parametrize(
    "total,esperado",
    [(0, 0), (-5, 0), (9.99, 0), (10, 1), (29.999999999, 3), (30, 3), (105.5, 10)],
)
def test_pontos_ganhos(total, esperado):
    assert formulas.pontos_ganhos(total) == esperado


@pytest.mark.parametrize(
    "estoque,minimo,status",
    [
        (0, 5, "CRITICO"),
        (-3, 5, "CRITICO"),
        (2, 10, "BAIXO"),
        (10, 10, "BAIXO"),
        (11, 10, "OK"),
        (None, 10, "VERIFICAR"),
        ("x", 10, "VERIFICAR"),
    ],
)
def test_status_estoque(estoque, minimo, status):
    assert status_estoque(estoque, minimo) == status


def test_reposicao():
    assert precisa_repor(2, 10)
    assert precisa_repor(10, 10)
    assert not precisa_repor(11, 10)
    assert sugestao_reposicao(2, 10) == 18
    assert sugestao_reposicao(2, 10, fator=3) == 28
    assert sugestao_reposicao(0, 0) == 0


def test_recompensas():
    assert [r.pontos for r in RECOMPENSAS] == [50, 100, 200, 300]
    assert recompensas_disponiveis(49) == []
    assert [r.pontos for r in recompensas_disponiveis(120)] == [50, 100]
    assert proxima_recompensa(120).pontos == 200
    assert proxima_recompensa(300) is None
    assert recompensa_por_pontos(100).desconto_percentual == 10.0
    assert recompensa_por_pontos(75) is None
