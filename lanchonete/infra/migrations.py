"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (uma por coleção do estado; listas aninhadas em JSON) e
    índices de consulta
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Catálogo: insumos e pratos
    """
    CREATE TABLE IF NOT EXISTS produto (
        id TEXT PRIMARY KEY,
        nome TEXT NOT NULL,
        tipo TEXT NOT NULL,            -- 'insumo' | 'prato'
        preco REAL DEFAULT 0,
        custo REAL DEFAULT 0,
        estoque REAL DEFAULT 0,        -- pratos sempre 0
        estoque_minimo REAL DEFAULT 0,
        unidade TEXT,
        fornecedor_id TEXT,
        categoria TEXT,
        receita_json TEXT              -- [{ingredientId, quantity}]
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS fornecedor (
        id TEXT PRIMARY KEY,
        nome TEXT NOT NULL,
        contato TEXT,
        email TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS cliente (
        id TEXT PRIMARY KEY,
        nome TEXT NOT NULL,
        sobrenome TEXT,
        fone TEXT,
        pontos_fidelidade INTEGER DEFAULT 0,
        criado_em TEXT,
        atualizado_em TEXT
    );
    """,
    # Vendas (imutáveis)
    """
    CREATE TABLE IF NOT EXISTS venda (
        id TEXT PRIMARY KEY,
        data TEXT,
        itens_json TEXT,
        subtotal REAL,
        desconto REAL,
        desconto_percentual REAL,
        total REAL,
        pontos_usados INTEGER,
        pontos_ganhos INTEGER,
        forma_pagamento TEXT,
        cliente_id TEXT,
        cliente_nome TEXT,
        comanda_id TEXT                -- venda originada de comanda
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS compra (
        id TEXT PRIMARY KEY,
        data TEXT,
        fornecedor_id TEXT,
        itens_json TEXT,
        total REAL,
        status TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS comanda (
        id TEXT PRIMARY KEY,
        cliente_nome TEXT,
        aberta_em TEXT,
        itens_json TEXT,
        total REAL,
        status TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS lista_compras (
        id TEXT PRIMARY KEY,
        produto_id TEXT,
        quantidade REAL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_venda_data ON venda(data);",
    "CREATE INDEX IF NOT EXISTS idx_compra_data ON compra(data);",
    "CREATE INDEX IF NOT EXISTS idx_produto_tipo ON produto(tipo);",
]


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1
