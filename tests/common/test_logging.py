"""Tests for JSON logging."""

from __future__ import annotations

import json
import logging

from objstore.common.logging import JsonFormatter, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="objstore.storage",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="unexpected status expected=%s status=%s",
        args=(200, 500),
        exc_info=None,
    )
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


def test_json_formatter_payload():
    payload = json.loads(JsonFormatter().format(_record()))

    assert payload == {
        "level": "WARNING",
        "logger": "objstore.storage",
        "message": "unexpected status expected=200 status=500",
    }


def test_json_formatter_merges_extra():
    record = _record(extra={"status": 500, "bucket": "타코"})

    text = JsonFormatter().format(record)

    assert "타코" in text
    assert json.loads(text)["status"] == 500


def test_setup_logging_configures_root_and_cli():
    setup_logging("DEBUG")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert logging.getLogger("objstore.cli").propagate is False


def test_json_formatter_lifts_context_attributes():
    record = _record(operation="get_object", bucket="some-bucket", unrelated="x")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["operation"] == "get_object"
    assert payload["bucket"] == "some-bucket"
    assert "unrelated" not in payload


def test_json_formatter_serializes_unknown_values():
    record = _record(extra={"key": b"taco"})

    assert json.loads(JsonFormatter().format(record))["key"] == "b'taco'"


def test_setup_logging_quiets_connection_pool():
    setup_logging("DEBUG")

    assert logging.getLogger("urllib3").level == logging.WARNING
