"""Tests for structured logging setup."""

import json
import logging

import pytest

from store_locator.core.logging_config import (
    RequestContextFilter,
    request_id_var,
    setup_logging,
    shop_var,
)


def test_filter_injects_request_context() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
    request_token = request_id_var.set("req-1")
    shop_token = shop_var.set("acme")
    try:
        assert RequestContextFilter().filter(record) is True
    finally:
        request_id_var.reset(request_token)
        shop_var.reset(shop_token)

    assert record.request_id == "req-1"  # type: ignore[attr-defined]
    assert record.shop == "acme"  # type: ignore[attr-defined]


def test_setup_logging_emits_json(capsys: pytest.CaptureFixture[str]) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    shop_token = shop_var.set("acme")
    try:
        setup_logging(debug=False)
        logging.getLogger("store_locator.test").info("Created store %s", "Downtown")
    finally:
        shop_var.reset(shop_token)
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    entry = json.loads(line)
    assert entry["message"] == "Created store Downtown"
    assert entry["level"] == "INFO"
    assert entry["shop"] == "acme"
    assert "timestamp" in entry
    assert logging.getLogger("httpx").level == logging.WARNING
