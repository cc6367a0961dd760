from lanchonete.infra import logger as logger_mod


def test_logging_desabilitado_nao_escreve(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_mod, "ENABLE_LOGGING", False)
    monkeypatch.setattr(logger_mod, "LOG_FILES", {"system": tmp_path / "system.log"})
    logger_mod.log_system_event("teste")
    assert logger_mod.get_log_summary("system") is None
    assert not (tmp_path / "system.log").exists()


def test_logging_habilitado_grava_eventos(monkeypatch, tmp_path):
    log_file = tmp_path / "system.log"
    monkeypatch.setattr(logger_mod, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger_mod, "LOG_FILES", {"system": log_file})
    monkeypatch.setitem(
        logger_mod.LOGGERS, "system", logger_mod.setup_logger("lanchonete.test.system", str(log_file))
    )

    logger_mod.log_system_event("estoque_negativo", {"produto_id": "a"}, level="warning")
    logger_mod.log_file_operation("export", "backup.json", rows_processed=3)

    conteudo = logger_mod.get_log_summary("system")
    assert "WARNING" in conteudo
    assert "estoque_negativo" in conteudo
    assert "FILE_EXPORT: backup.json rows=3" in conteudo
    assert logger_mod.get_log_summary("vendas") == "Log vendas não encontrado."
