import json
import logging

import pytest
import structlog

from app.logging_config import configure_logging, get_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.contextvars.clear_contextvars()
    configure_logging()
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_json_lines_carry_service_and_context(self, capsys, restore_logging):
        configure_logging(log_level="debug", json_logs=True)
        structlog.contextvars.bind_contextvars(correlation_id="corr-9")

        get_logger("tests.logging").info("user_lookup", username="alice")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "user_lookup"
        assert record["username"] == "alice"
        assert record["level"] == "info"
        assert record["service"] == "user-store"
        assert record["correlation_id"] == "corr-9"
        assert logging.getLogger().level == logging.DEBUG

    def test_client_library_loggers_are_quieted(self, restore_logging):
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("aiobotocore").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_logging):
        configure_logging(log_level="chatty")
        assert logging.getLogger().level == logging.INFO
