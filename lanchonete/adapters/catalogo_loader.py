# lanchonete/adapters/catalogo_loader.py
"""
Loader de planilhas de CATÁLOGO (CSV ou XLSX).

Essa função:
- lê a planilha usando pandas (todas as colunas como texto);
- normaliza cabeçalhos (acentos, variações, sinônimos);
- devolve `Produto`s prontos para o cadastro, sem validar contra o
  catálogo (a validação acontece no caso de uso).

Colunas reconhecidas: id, nome, tipo, preco, custo, estoque,
estoque_minimo, unidade, fornecedor_id, categoria, receita.
A receita usa o formato "insumo:qtd;insumo:qtd".
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from lanchonete.adapters.parsers import parse_numero, parse_receita_raw
from lanchonete.domain.models import TIPO_INSUMO, TIPO_PRATO, ItemReceita, Produto
from lanchonete.infra.logger import log_file_operation


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key) -> Optional[str]:
    """Valor da linha como string limpa, tratando NA do pandas."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


_ALIASES = {
    "id": "id",
    "codigo": "id",
    "cod": "id",

    "nome": "nome",
    "produto": "nome",
    "descricao": "nome",

    "tipo": "tipo",

    "preco": "preco",
    "preco venda": "preco",
    "valor": "preco",

    "custo": "custo",
    "preco custo": "custo",

    "estoque": "estoque",
    "estoque atual": "estoque",
    "quantidade": "estoque",

    "estoque minimo": "estoque_minimo",
    "minimo": "estoque_minimo",
    "min": "estoque_minimo",

    "unidade": "unidade",
    "un": "unidade",

    "fornecedor": "fornecedor_id",
    "fornecedor id": "fornecedor_id",

    "categoria": "categoria",

    "receita": "receita",
    "ficha tecnica": "receita",
}

_TIPOS = {
    "insumo": TIPO_INSUMO,
    "ingrediente": TIPO_INSUMO,
    "prato": TIPO_PRATO,
    "lanche": TIPO_PRATO,
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    return df.rename(columns={col: _ALIASES.get(_slug(col), _slug(col)) for col in df.columns})


def _read(path: str) -> pd.DataFrame:
    if Path(path).suffix.lower() in {".xlsx", ".xls"}:
        return pd.read_excel(path, dtype="string")
    return pd.read_csv(path, dtype="string", sep=None, engine="python")


def _numero(row, key, linha: int) -> float:
    """Célula numérica; vazia vale 0, texto que não é número é erro."""
    txt = _safe_get(row, key)
    if txt is None:
        return 0.0
    val = parse_numero(txt)
    if val is None:
        raise ValueError(f"Linha {linha}: valor inválido em {key}: {txt!r}")
    return val


def _produto_from_row(row: Dict[str, Any], linha: int) -> Produto:
    nome = _safe_get(row, "nome")
    if not nome:
        raise ValueError(f"Linha {linha}: nome obrigatório")
    tipo_txt = _slug(_safe_get(row, "tipo") or "")
    receita_txt = _safe_get(row, "receita")
    tipo = _TIPOS.get(tipo_txt) or (TIPO_PRATO if receita_txt else TIPO_INSUMO)
    try:
        receita = [ItemReceita(i, q) for i, q in parse_receita_raw(receita_txt)]
    except ValueError as e:
        raise ValueError(f"Linha {linha}: {e}") from e
    return Produto(
        id=_safe_get(row, "id") or "",
        nome=nome,
        tipo=tipo,
        preco=_numero(row, "preco", linha),
        custo=_numero(row, "custo", linha),
        estoque=_numero(row, "estoque", linha),
        estoque_minimo=_numero(row, "estoque_minimo", linha),
        unidade=(_safe_get(row, "unidade") or "un").lower(),
        fornecedor_id=_safe_get(row, "fornecedor_id"),
        categoria=_safe_get(row, "categoria") or "Geral",
        receita=receita,
    )


def load_produtos(path: str) -> List[Produto]:
    """Lê CSV/XLSX de catálogo e devolve a lista de produtos (ordem da planilha)."""
    df = _normalize_columns(_read(path))
    out = [_produto_from_row(row, i) for i, (_, row) in enumerate(df.iterrows(), start=2)]
    log_file_operation("import", path, rows_processed=len(out))
    return out
