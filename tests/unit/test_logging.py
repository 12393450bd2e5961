from __future__ import annotations

import json
import logging

from tracker_store.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_ROWS = 10


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.rows = EXPECTED_ROWS
    record.operation = "insert_submissions"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["rows"] == EXPECTED_ROWS
    assert payload["operation"] == "insert_submissions"
    assert "pathname" not in payload


def test_configure_logging_installs_json_handler() -> None:
    configure_logging(level="DEBUG", json_logs=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)

    configure_logging(level="INFO")
    assert not any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)
