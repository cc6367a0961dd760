"""
UC: Registrar VENDA (venda rápida ou fechamento de comanda).

Fluxo:
1) Valida carrinho, forma de pagamento, desconto e pontos.
2) Calcula subtotal, desconto, total e pontos ganhos.
3) Baixa o estoque dos insumos (receitas dos pratos).
4) Ajusta os pontos do cliente: ``- pontos_usados + pontos_ganhos``.
5) Devolve um novo `EstadoApp` com a venda anexada.

Obs.:
- Ou os três efeitos (venda, estoque, cliente) aparecem no estado novo ou
  nenhum: o estado recebido nunca é alterado.
- Não há piso para o saldo de pontos. Validar saldo suficiente antes do
  resgate é responsabilidade de quem chama; saldo negativo gera aviso.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Tuple

from lanchonete.config import DEFAULTS
from lanchonete.domain import formulas
from lanchonete.domain.errors import LanchoneteError, ValidacaoError
from lanchonete.domain.models import FORMAS_PAGAMENTO, EstadoApp, ItemCarrinho, Venda
from lanchonete.infra.logger import log_system_event, log_transaction, log_venda
from lanchonete.usecases.comum import agora_iso, dinheiro, normaliza_str, novo_id, validar_itens
from lanchonete.usecases.movimentacao import aplicar_baixa_venda


def _validar_parametros(
    forma_pagamento: str,
    desconto_percentual: Optional[float],
    pontos_usados: Optional[int],
) -> None:
    if forma_pagamento not in FORMAS_PAGAMENTO:
        raise ValidacaoError(
            f"Forma de pagamento inválida: {forma_pagamento!r} (use {', '.join(FORMAS_PAGAMENTO)})"
        )
    if desconto_percentual is not None and not (0 <= desconto_percentual <= 100):
        raise ValidacaoError("Desconto percentual deve estar entre 0 e 100")
    if pontos_usados is not None and pontos_usados < 0:
        raise ValidacaoError("Pontos usados não podem ser negativos")


def calcular_venda(
    itens: Iterable[ItemCarrinho],
    desconto_percentual: Optional[float] = None,
    reais_por_ponto: float = DEFAULTS.pontos_por_real,
) -> dict:
    """Totais de um carrinho, sem efeitos colaterais (prévia do caixa)."""
    itens = list(itens)
    sub = formulas.subtotal(itens)
    desc = formulas.desconto(sub, desconto_percentual)
    tot = formulas.total(sub, desc)
    return {
        "subtotal": sub,
        "desconto": desc,
        "total": tot,
        "pontos_ganhos": formulas.pontos_ganhos(tot, reais_por_ponto),
    }


def registrar_venda(
    estado: EstadoApp,
    itens: Iterable[ItemCarrinho],
    forma_pagamento: str,
    cliente_id: Optional[str] = None,
    desconto_percentual: Optional[float] = None,
    pontos_usados: Optional[int] = None,
    cliente_nome: Optional[str] = None,
    comanda_id: Optional[str] = None,
    bloquear_estoque_negativo: bool = DEFAULTS.bloquear_estoque_negativo,
) -> Tuple[EstadoApp, Venda]:
    """Registra uma venda e devolve ``(novo_estado, venda)``."""
    log_system_event("venda_start", {"forma_pagamento": forma_pagamento, "cliente_id": cliente_id})
    try:
        itens = validar_itens(itens)
        _validar_parametros(forma_pagamento, desconto_percentual, pontos_usados)

        calc = calcular_venda(itens, desconto_percentual)

        produtos = aplicar_baixa_venda(estado.produtos, itens, bloquear_estoque_negativo)

        clientes = estado.clientes
        cliente_nome = normaliza_str(cliente_nome)
        cliente_id = normaliza_str(cliente_id)
        if cliente_id:
            cliente = estado.cliente(cliente_id)
            if cliente is None:
                log_system_event("venda_cliente_inexistente", {"cliente_id": cliente_id}, level="warning")
            else:
                saldo = cliente.pontos_fidelidade - (pontos_usados or 0) + calc["pontos_ganhos"]
                if saldo < 0:
                    log_system_event(
                        "pontos_fidelidade_negativos",
                        {"cliente_id": cliente_id, "saldo": saldo},
                        level="warning",
                    )
                atualizado = replace(cliente, pontos_fidelidade=saldo, atualizado_em=agora_iso())
                clientes = [atualizado if c.id == cliente_id else c for c in estado.clientes]
                cliente_nome = cliente_nome or cliente.nome_completo

        venda = Venda(
            id=novo_id(),
            data=agora_iso(),
            itens=itens,
            subtotal=dinheiro(calc["subtotal"]),
            desconto=dinheiro(calc["desconto"]),
            desconto_percentual=desconto_percentual,
            total=dinheiro(calc["total"]),
            pontos_usados=pontos_usados,
            pontos_ganhos=calc["pontos_ganhos"],
            forma_pagamento=forma_pagamento,
            cliente_id=cliente_id,
            cliente_nome=cliente_nome,
            comanda_id=comanda_id,
        )

        novo = replace(
            estado,
            produtos=produtos,
            clientes=clientes,
            vendas=[*estado.vendas, venda],
        )

        log_venda("registrar", venda.id, venda.total, itens=len(itens), forma_pagamento=forma_pagamento)
        log_transaction("registrar_venda", {"itens": len(itens), "cliente_id": cliente_id}, result=venda.id)
        return novo, venda
    except LanchoneteError as e:
        log_transaction("registrar_venda", {"forma_pagamento": forma_pagamento}, error=str(e))
        log_system_event("venda_error", {"error": str(e)}, level="error")
        raise
