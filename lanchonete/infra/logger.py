# lanchonete/infra/logger.py
"""
Logs em arquivo da lanchonete, um arquivo por assunto:

    transactions.log  resultado (ou falha) de cada caso de uso
    vendas.log        vendas e fechamento de comandas
    compras.log       compras recebidas
    database.log      carga/gravação do estado no SQLite
    system.log        avisos de integridade, assistente de IA, import/export

Desligado por padrão; `LANCHONETE_LOGGING=1` liga. A pasta pode ser trocada
com `LANCHONETE_LOGS_DIR`.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional


ENABLE_LOGGING = os.getenv("LANCHONETE_LOGGING", "0").strip().lower() in {"1", "true", "sim", "yes"}
# Liga o log mesmo sem a variável de ambiente (uso em depuração)
ENABLE_OUTPUT = False

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOGS_DIR = Path(os.getenv("LANCHONETE_LOGS_DIR", str(Path(__file__).parent.parent / "logs")))

LOG_FILES = {
    nome: LOGS_DIR / f"{nome}.log"
    for nome in ("transactions", "vendas", "compras", "database", "system")
}


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """Logger isolado (sem propagar para o root) gravando em ``log_file``.

    O arquivo só é criado na primeira mensagem, então importar o módulo com
    o log desligado não deixa arquivos vazios.
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(handler)
    return logger


LOGGERS: Dict[str, logging.Logger] = {
    nome: setup_logger(f"lanchonete.{nome}", str(arquivo)) for nome, arquivo in LOG_FILES.items()
}


def _ativo() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """Desfecho de um caso de uso: ``result`` no sucesso, ``error`` na falha."""
    if not _ativo():
        return
    if error:
        LOGGERS["transactions"].error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        LOGGERS["transactions"].info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_venda(action: str, venda_id: str, total: float, **kwargs) -> None:
    if not _ativo():
        return
    LOGGERS["vendas"].info(f"VENDA_{action.upper()}: {dict(venda_id=venda_id, total=total, **kwargs)}")


def log_compra(action: str, compra_id: str, total: float, **kwargs) -> None:
    if not _ativo():
        return
    LOGGERS["compras"].info(f"COMPRA_{action.upper()}: {dict(compra_id=compra_id, total=total, **kwargs)}")


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """``table`` é ``"*"`` quando o estado inteiro é carregado ou gravado."""
    if not _ativo():
        return
    LOGGERS["database"].info(f"DB_{operation}: table={table} rows={affected_rows} {kwargs or ''}".rstrip())


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """Evento do sistema; ``level`` é ``info``, ``warning`` ou ``error``."""
    if not _ativo():
        return
    logger = LOGGERS["system"]
    details = details or {}
    getattr(logger, level.lower(), logger.info)(f"SYSTEM_EVENT: {event} - {details}")


def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    if not _ativo():
        return
    LOGGERS["system"].info(f"FILE_{operation.upper()}: {file_path} rows={rows_processed} {kwargs or ''}".rstrip())


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """Últimas ``lines`` linhas de um dos arquivos de log (None com o log desligado)."""
    if not _ativo():
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."
    try:
        return "".join(log_file.read_text(encoding="utf-8").splitlines(keepends=True)[-lines:])
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
