"""
Unit tests for logging configuration helpers.
"""

import json
import logging
from types import SimpleNamespace

from placement_advisor.core.logging_config import (
    ColoredFormatter,
    JSONFormatter,
    filter_sensitive_data,
    setup_logging,
    truncate_large_data,
)
from placement_advisor.middleware.logging_middleware import _sanitize_body


def _record(msg="hello", **extra):
    record = logging.LogRecord("test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:

    def test_json_formatter_merges_extra_fields(self):
        output = JSONFormatter().format(_record(extra_fields={"duration_ms": 1.5}))
        data = json.loads(output)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["duration_ms"] == 1.5

    def test_colored_formatter_leaves_record_untouched(self):
        record = _record()
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[32m" in output
        assert record.levelname == "INFO"


class TestSensitiveData:

    def test_filters_nested_keys(self):
        data = {"email": "a@b.com", "password": "x", "nested": [{"Authorization": "Bearer t"}]}
        filtered = filter_sensitive_data(data)
        assert filtered["email"] == "a@b.com"
        assert filtered["password"] == "***FILTERED***"
        assert filtered["nested"][0]["Authorization"] == "***FILTERED***"

    def test_filters_cookie_headers(self):
        filtered = filter_sensitive_data({"set-cookie": "token=abc"})
        assert filtered["set-cookie"] == "***FILTERED***"

    def test_truncate(self):
        assert truncate_large_data("abc", max_length=5) == "abc"
        assert truncate_large_data("abcdef", max_length=3).startswith("abc... (truncated")

    def test_form_body_is_sanitized(self):
        body = b"email=a%40b.com&password=secret"
        output = _sanitize_body(body, "application/x-www-form-urlencoded")
        assert "secret" not in output
        assert "a@b.com" in output

    def test_json_body_is_sanitized(self):
        output = _sanitize_body(b'{"token": "abc", "text": "hi"}', "application/json")
        assert "abc" not in output
        assert "hi" in output

    def test_empty_body(self):
        assert _sanitize_body(b"", "application/json") is None


class TestSetupLogging:

    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        config = SimpleNamespace(
            log_level="debug",
            log_console_enabled=False,
            log_file_enabled=True,
            log_file_path=str(log_file),
            log_json_format=True,
        )
        root_logger = logging.getLogger()
        saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
        try:
            setup_logging(config)
            logging.getLogger("placement_advisor.test").info("ready")
            for handler in root_logger.handlers:
                handler.flush()

            assert root_logger.level == logging.DEBUG
            lines = log_file.read_text(encoding="utf-8").splitlines()
            assert any(json.loads(line)["message"] == "ready" for line in lines)
        finally:
            for handler in root_logger.handlers:
                handler.close()
            root_logger.handlers = saved_handlers
            root_logger.setLevel(saved_level)
