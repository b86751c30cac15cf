import logging

from formrelay.utils.logger_util import get_logger


def test_logger_writes_to_configured_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("FORMRELAY_LOG_DIR", str(tmp_path))
    logger = get_logger("formrelay.tests.file_logger", logging.DEBUG)
    logger.error("contact: Unparsable content")
    for handler in logger.handlers:
        handler.flush()
    log_file = tmp_path / "formrelay.tests.file_logger.log"
    assert "contact: Unparsable content" in log_file.read_text(encoding="utf-8")
    assert logger.propagate is False


def test_empty_log_dir_streams_only(monkeypatch):
    monkeypatch.setenv("FORMRELAY_LOG_DIR", "")
    logger = get_logger("formrelay.tests.stream_logger")
    assert all(not isinstance(h, logging.FileHandler) for h in logger.handlers)


def test_repeated_calls_do_not_duplicate_handlers(monkeypatch):
    monkeypatch.setenv("FORMRELAY_LOG_DIR", "")
    first = get_logger("formrelay.tests.repeat_logger")
    count = len(first.handlers)
    second = get_logger("formrelay.tests.repeat_logger", logging.WARNING)
    assert second is first
    assert len(second.handlers) == count
    assert second.level == logging.WARNING


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("FORMRELAY_LOG_DIR", "")
    monkeypatch.setenv("FORMRELAY_LOG_LEVEL", "warning")
    logger = get_logger("formrelay.tests.level_logger", logging.DEBUG)
    assert logger.level == logging.WARNING
