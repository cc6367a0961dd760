"""
Utilidades compartilhadas pelos casos de uso (ids, datas e validação de
carrinho).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Iterable, List, Optional

from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import ItemCarrinho


def novo_id() -> str:
    # Gerado a cada tentativa: repetir uma venda que falhou cria outro id.
    return uuid.uuid4().hex


def agora_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def dinheiro(valor: float) -> float:
    return round(float(valor), 2)


def normaliza_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def validar_itens(itens: Iterable[ItemCarrinho], permitir_vazio: bool = False) -> List[ItemCarrinho]:
    """Valida as linhas de um carrinho e devolve uma lista (cópia rasa)."""
    itens = list(itens or [])
    if not itens and not permitir_vazio:
        raise ValidacaoError("Carrinho vazio")
    for i, item in enumerate(itens, start=1):
        if not normaliza_str(item.produto_id):
            raise ValidacaoError(f"Item {i}: produto obrigatório")
        if item.quantidade is None or item.quantidade <= 0:
            raise ValidacaoError(f"Item {i} ({item.produto_id}): quantidade deve ser positiva")
        if item.preco_unitario is None or item.preco_unitario < 0:
            raise ValidacaoError(f"Item {i} ({item.produto_id}): preço unitário inválido")
    return itens
