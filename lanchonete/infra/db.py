# lanchonete/infra/db.py
"""
Conexão SQLite usada pelos repositórios e pelas migrações.

O estado inteiro é gravado a cada operação (ver `EstadoRepo.save`), então a
conexão é curta: abre, grava tudo numa transação e fecha.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

# segundos aguardando outro processo liberar o arquivo (CLI em paralelo)
BUSY_TIMEOUT = 5.0


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """Abre o banco (criando a pasta, se preciso) com linhas acessíveis por nome.

    Commit ao sair do bloco; rollback e re-raise em caso de exceção.
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
