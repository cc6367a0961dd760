"""
Utilidades de parsing para itens digitados na linha de comando e nas
planilhas de catálogo.

Formatos aceitos:
    item:    "<produto_id>:<quantidade>[@<preco>]"   ex.: "xburger:2", "coca:1@6,50"
    receita: "<insumo_id>:<quantidade>;..."          ex.: "pao:1;carne:0,15"

Números aceitam vírgula ou ponto como separador decimal.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

_NUM_RE = re.compile(r"^[-+]?\d+(?:[.,]\d+)?$")


def parse_numero(txt: Optional[str]) -> Optional[float]:
    """Converte "12,5" ou "12.5" em float; None se não for número."""
    if txt is None:
        return None
    s = str(txt).strip()
    if not _NUM_RE.match(s):
        return None
    return float(s.replace(",", "."))


def parse_item_raw(txt: str) -> Tuple[Optional[str], Optional[float], Optional[float]]:
    """Interpreta uma string de item de carrinho.

    Exemplos:
        "xburger:2"     → ("xburger", 2.0, None)
        "coca:1@6,50"   → ("coca", 1.0, 6.5)
        "xburger"       → ("xburger", 1.0, None)
        ""              → (None, None, None)

    Returns:
        Uma tupla (produto_id, quantidade, preco). Qualquer valor que não
        possa ser determinado é retornado como None.
    """
    if txt is None:
        return None, None, None
    s = str(txt).strip()
    if not s:
        return None, None, None
    preco = None
    if "@" in s:
        s, preco_txt = s.split("@", 1)
        preco = parse_numero(preco_txt)
    if ":" in s:
        produto_id, qtd_txt = s.split(":", 1)
        quantidade = parse_numero(qtd_txt)
    else:
        produto_id, quantidade = s, 1.0
    produto_id = produto_id.strip() or None
    return produto_id, quantidade, preco


def parse_receita_raw(txt: Optional[str]) -> List[Tuple[str, float]]:
    """Interpreta "insumo:qtd;insumo:qtd". Linhas inválidas levantam ValueError."""
    if txt is None:
        return []
    s = str(txt).strip()
    if not s:
        return []
    out: List[Tuple[str, float]] = []
    for parte in re.split(r"[;|]", s):
        parte = parte.strip()
        if not parte:
            continue
        ingrediente, qtd, _ = parse_item_raw(parte)
        if not ingrediente or qtd is None:
            raise ValueError(f"Linha de receita inválida: {parte!r}")
        out.append((ingrediente, qtd))
    return out
