"""
UC: Registrar COMPRA de insumos (entrada de estoque).

- registrar_compra(): cria a compra (sempre "received") e soma as
  quantidades ao estoque no mesmo estado novo.

Obs.:
- Linhas com produto desconhecido entram no registro da compra mas não
  movimentam estoque.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Tuple

from lanchonete.domain import formulas
from lanchonete.domain.errors import LanchoneteError, ValidacaoError
from lanchonete.domain.models import Compra, EstadoApp, ItemCarrinho
from lanchonete.infra.logger import log_compra, log_system_event, log_transaction
from lanchonete.usecases.comum import agora_iso, dinheiro, normaliza_str, novo_id, validar_itens
from lanchonete.usecases.movimentacao import aplicar_compra


def registrar_compra(
    estado: EstadoApp,
    fornecedor_id: str,
    itens: Iterable[ItemCarrinho],
) -> Tuple[EstadoApp, Compra]:
    """Registra uma compra recebida e devolve ``(novo_estado, compra)``."""
    log_system_event("compra_start", {"fornecedor_id": fornecedor_id})
    try:
        fornecedor_id = normaliza_str(fornecedor_id)
        if not fornecedor_id:
            raise ValidacaoError("Fornecedor obrigatório")
        itens = validar_itens(itens)

        compra = Compra(
            id=novo_id(),
            data=agora_iso(),
            fornecedor_id=fornecedor_id,
            itens=itens,
            total=dinheiro(formulas.subtotal(itens)),
        )
        novo = replace(
            estado,
            produtos=aplicar_compra(estado.produtos, itens),
            compras=[*estado.compras, compra],
        )

        log_compra("registrar", compra.id, compra.total, fornecedor_id=fornecedor_id, itens=len(itens))
        log_transaction("registrar_compra", {"fornecedor_id": fornecedor_id, "itens": len(itens)}, result=compra.id)
        return novo, compra
    except LanchoneteError as e:
        log_transaction("registrar_compra", {"fornecedor_id": fornecedor_id}, error=str(e))
        log_system_event("compra_error", {"error": str(e)}, level="error")
        raise
