"""
UC: Ciclo de vida das COMANDAS (contas abertas).

Estados: aberta → aberta (salvar itens) → fechada (terminal).

- abrir_comanda(): cria a comanda vazia e devolve o id.
- atualizar_comanda(): substitui a lista de itens e recalcula o total.
- fechar_comanda(): converte a comanda em venda e a retira das ativas.

Obs.:
- Comanda inexistente em atualizar/fechar é no-op (não é erro): fechar duas
  vezes o mesmo id não gera segunda venda.
- O fechamento e a remoção da comanda acontecem no mesmo estado novo.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Tuple

from lanchonete.config import DEFAULTS
from lanchonete.domain import formulas
from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import STATUS_COMANDA_ABERTA, Comanda, EstadoApp, ItemCarrinho, Venda
from lanchonete.infra.logger import log_system_event, log_transaction
from lanchonete.usecases.comum import agora_iso, dinheiro, normaliza_str, novo_id, validar_itens
from lanchonete.usecases.registrar_venda import registrar_venda


def abrir_comanda(estado: EstadoApp, cliente_nome: str) -> Tuple[EstadoApp, str]:
    nome = normaliza_str(cliente_nome)
    if not nome:
        raise ValidacaoError("Nome do cliente obrigatório")
    comanda = Comanda(id=novo_id(), cliente_nome=nome, aberta_em=agora_iso())
    log_transaction("abrir_comanda", {"cliente_nome": nome}, result=comanda.id)
    return replace(estado, comandas_ativas=[*estado.comandas_ativas, comanda]), comanda.id


def atualizar_comanda(estado: EstadoApp, comanda_id: str, itens: Iterable[ItemCarrinho]) -> EstadoApp:
    """Substitui os itens da comanda (carrinho salvo)."""
    comanda = estado.comanda(comanda_id)
    if comanda is None or comanda.status != STATUS_COMANDA_ABERTA:
        log_system_event("comanda_nao_encontrada", {"comanda_id": comanda_id, "acao": "atualizar"}, level="warning")
        return estado

    itens = validar_itens(itens, permitir_vazio=True)
    atualizada = replace(comanda, itens=itens, total=dinheiro(formulas.subtotal(itens)))
    log_transaction("atualizar_comanda", {"comanda_id": comanda_id, "itens": len(itens)}, result=atualizada.total)
    return replace(
        estado,
        comandas_ativas=[atualizada if c.id == comanda_id else c for c in estado.comandas_ativas],
    )


def fechar_comanda(
    estado: EstadoApp,
    comanda_id: str,
    forma_pagamento: str,
    bloquear_estoque_negativo: bool = DEFAULTS.bloquear_estoque_negativo,
) -> Tuple[EstadoApp, Optional[Venda]]:
    """Fecha a comanda; devolve ``(estado, None)`` se ela não existir."""
    comanda = estado.comanda(comanda_id)
    if comanda is None:
        log_system_event("comanda_nao_encontrada", {"comanda_id": comanda_id, "acao": "fechar"}, level="warning")
        return estado, None

    novo, venda = registrar_venda(
        estado,
        comanda.itens,
        forma_pagamento,
        cliente_nome=comanda.cliente_nome,
        comanda_id=comanda.id,
        bloquear_estoque_negativo=bloquear_estoque_negativo,
    )
    novo = replace(novo, comandas_ativas=[c for c in novo.comandas_ativas if c.id != comanda_id])
    log_transaction("fechar_comanda", {"comanda_id": comanda_id}, result=venda.id)
    return novo, venda
