# lanchonete/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ProdutoRepo
- FornecedorRepo
- ClienteRepo
- VendaRepo
- CompraRepo
- ComandaRepo
- ListaComprasRepo
- EstadoRepo (carga e gravação do estado completo)

Os repositórios de coleção trabalham com dicionários no formato persistido
(chaves camelCase, ver `infra/serializers.py`). Listas aninhadas (itens,
receita) são gravadas como JSON em colunas `*_json`.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, Iterable, List, Tuple

from .db import connect
from .logger import log_database_operation
from .migrations import apply_migrations
from . import serializers
from lanchonete.domain.models import EstadoApp


# -------------------------
# Base
# -------------------------

class _ColecaoRepo:
    """Coleção gravada integralmente (delete + insert, na ordem da lista)."""

    tabela: str = ""
    # (coluna_sql, chave_persistida, é_json)
    colunas: List[Tuple[str, str, bool]] = []

    def _to_row(self, d: Dict[str, Any]) -> Dict[str, Any]:
        row = {}
        for col, chave, is_json in self.colunas:
            val = d.get(chave)
            if is_json:
                val = json.dumps(val, ensure_ascii=False) if val is not None else None
            row[col] = val
        return row

    def _from_row(self, row: sqlite3.Row) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for col, chave, is_json in self.colunas:
            val = row[col]
            if is_json:
                val = json.loads(val) if val else None
            if val is not None:
                d[chave] = val
        return d

    def write_all(self, conn: sqlite3.Connection, rows: Iterable[Dict[str, Any]]) -> int:
        rows = [self._to_row(r) for r in rows]
        conn.execute(f"DELETE FROM {self.tabela}")
        if rows:
            cols = [c for c, _, _ in self.colunas]
            conn.executemany(
                f"INSERT INTO {self.tabela} ({','.join(cols)}) VALUES ({','.join(':' + c for c in cols)})",
                rows,
            )
        return len(rows)

    def read_all(self, conn: sqlite3.Connection) -> List[Dict[str, Any]]:
        cols = ",".join(c for c, _, _ in self.colunas)
        cur = conn.execute(f"SELECT {cols} FROM {self.tabela} ORDER BY rowid")
        return [self._from_row(r) for r in cur.fetchall()]


# -------------------------
# Coleções
# -------------------------

class ProdutoRepo(_ColecaoRepo):
    tabela = "produto"
    colunas = [
        ("id", "id", False),
        ("nome", "name", False),
        ("tipo", "type", False),
        ("preco", "price", False),
        ("custo", "cost", False),
        ("estoque", "stock", False),
        ("estoque_minimo", "minStock", False),
        ("unidade", "unit", False),
        ("fornecedor_id", "supplierId", False),
        ("categoria", "category", False),
        ("receita_json", "recipe", True),
    ]


class FornecedorRepo(_ColecaoRepo):
    tabela = "fornecedor"
    colunas = [
        ("id", "id", False),
        ("nome", "name", False),
        ("contato", "contact", False),
        ("email", "email", False),
    ]


class ClienteRepo(_ColecaoRepo):
    tabela = "cliente"
    colunas = [
        ("id", "id", False),
        ("nome", "nome", False),
        ("sobrenome", "sobrenome", False),
        ("fone", "fone", False),
        ("pontos_fidelidade", "loyaltyPoints", False),
        ("criado_em", "created_at", False),
        ("atualizado_em", "updated_at", False),
    ]


class VendaRepo(_ColecaoRepo):
    tabela = "venda"
    colunas = [
        ("id", "id", False),
        ("data", "date", False),
        ("itens_json", "items", True),
        ("subtotal", "subtotal", False),
        ("desconto", "discount", False),
        ("desconto_percentual", "discountPercent", False),
        ("total", "total", False),
        ("pontos_usados", "loyaltyPointsUsed", False),
        ("pontos_ganhos", "loyaltyPointsEarned", False),
        ("forma_pagamento", "paymentMethod", False),
        ("cliente_id", "customerId", False),
        ("cliente_nome", "customerName", False),
        ("comanda_id", "comandaId", False),
    ]


class CompraRepo(_ColecaoRepo):
    tabela = "compra"
    colunas = [
        ("id", "id", False),
        ("data", "date", False),
        ("fornecedor_id", "supplierId", False),
        ("itens_json", "items", True),
        ("total", "total", False),
        ("status", "status", False),
    ]


class ComandaRepo(_ColecaoRepo):
    tabela = "comanda"
    colunas = [
        ("id", "id", False),
        ("cliente_nome", "customerName", False),
        ("aberta_em", "openedAt", False),
        ("itens_json", "items", True),
        ("total", "total", False),
        ("status", "status", False),
    ]


class ListaComprasRepo(_ColecaoRepo):
    tabela = "lista_compras"
    colunas = [
        ("id", "id", False),
        ("produto_id", "productId", False),
        ("quantidade", "quantity", False),
    ]


# -------------------------
# Estado completo
# -------------------------

class EstadoRepo:
    """Carrega e grava o `EstadoApp` inteiro numa única transação."""

    # chave do documento persistido -> repositório
    COLECOES = {
        "products": ProdutoRepo,
        "suppliers": FornecedorRepo,
        "customers": ClienteRepo,
        "sales": VendaRepo,
        "purchases": CompraRepo,
        "shoppingList": ListaComprasRepo,
        "activeComandas": ComandaRepo,
    }

    def __init__(self, db_path: str, migrate: bool = True):
        self.db_path = db_path
        if migrate:
            apply_migrations(db_path)
        self.repos = {chave: cls() for chave, cls in self.COLECOES.items()}

    def load(self) -> EstadoApp:
        with connect(self.db_path) as c:
            doc = {chave: repo.read_all(c) for chave, repo in self.repos.items()}
        log_database_operation("*", "LOAD", sum(len(v) for v in doc.values()))
        return serializers.estado_from_dict(doc)

    def save(self, estado: EstadoApp) -> None:
        doc = serializers.estado_to_dict(estado)
        total = 0
        with connect(self.db_path) as c:
            for chave, repo in self.repos.items():
                total += repo.write_all(c, doc[chave])
        log_database_operation("*", "SAVE", total)
