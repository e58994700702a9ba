import json
import logging

import pytest

from battlefleet.engine.logging import configure_logging, shutdown_logging
from battlefleet.game.core.errors import ConfigurationError
from battlefleet.game.infra.logging import JsonFormatter, build_logging_config, parse_logger_levels


def test_json_formatter_includes_fields_and_message() -> None:
    logger = logging.getLogger("test.json.formatter")
    record = logger.makeRecord(
        name=logger.name,
        level=logging.INFO,
        fn=__file__,
        lno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
        extra={"game_id": "g-1"},
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "hello world"
    assert payload["fields"] == {"game_id": "g-1"}
    assert payload["level"] == "INFO"


def test_build_logging_config_text_and_json(monkeypatch) -> None:
    monkeypatch.delenv("BATTLEFLEET_LOG_DIR", raising=False)
    monkeypatch.delenv("BATTLEFLEET_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "text")
    config = build_logging_config()
    assert config.file_path is None
    configure_logging(config)
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert root.handlers
    monkeypatch.setenv("LOG_FORMAT", "json")
    monkeypatch.setenv("BATTLEFLEET_LOG_LEVEL", "warning")
    configure_logging(build_logging_config())
    assert root.level == logging.WARNING


def test_build_logging_config_writes_run_file_under_log_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("BATTLEFLEET_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    configure_logging(build_logging_config())

    logging.getLogger("test.logging.file.path").info("hello", extra={"turn": 3})
    shutdown_logging()

    files = list((tmp_path / "logs").glob("battlefleet_run_*.jsonl"))
    assert files
    lines = files[0].read_text(encoding="utf-8").splitlines()
    assert any(json.loads(line)["fields"] == {"turn": 3} for line in lines)


def test_per_logger_levels_from_env(monkeypatch) -> None:
    monkeypatch.delenv("BATTLEFLEET_LOG_DIR", raising=False)
    monkeypatch.setenv("BATTLEFLEET_LOG_LEVELS", "battlefleet.test.ai=debug, ,battlefleet.test.combat=ERROR")
    config = build_logging_config()
    assert config.logger_levels == (("battlefleet.test.ai", "DEBUG"), ("battlefleet.test.combat", "ERROR"))
    configure_logging(config)
    assert logging.getLogger("battlefleet.test.ai").level == logging.DEBUG
    assert logging.getLogger("battlefleet.test.combat").level == logging.ERROR


def test_unknown_per_logger_level_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Unknown log level 'LOUD'"):
        parse_logger_levels("battlefleet.game.ai=LOUD")
    assert parse_logger_levels("") == ()
