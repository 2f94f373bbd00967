"""
Tests for structured logging.
"""

import json
import logging
import sys

from gatekeeper.logging_config import JsonFormatter


def make_record(**extra) -> logging.LogRecord:
    """Build a log record the way Logger.info(..., extra=...) does."""
    record = logging.LogRecord(
        "gatekeeper.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format_basic_fields(self):
        """Test the standard fields are present."""
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["severity"] == "INFO"
        assert data["name"] == "gatekeeper.test"
        assert data["message"] == "hello world"
        assert "timestamp" in data
        assert "exception" not in data

    def test_format_includes_extra_fields(self):
        """Test fields passed via extra are included."""
        data = json.loads(
            JsonFormatter().format(make_record(provider="google", urn="urn:google:42"))
        )

        assert data["provider"] == "google"
        assert data["urn"] == "urn:google:42"
        assert "lineno" not in data

    def test_format_exception(self):
        """Test exceptions are rendered."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in data["exception"]
