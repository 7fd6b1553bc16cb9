"""Unit tests for configure_logging / get_logger."""

from __future__ import annotations

import io
import json
import logging

import pytest

from georesolve.utils.logging import configure_logging, get_logger
from tests.conftest import quiet_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    quiet_logging()


def test_json_output(restore_logging: None) -> None:
    stream = io.StringIO()
    configure_logging(log_level="INFO", json_output=True, stream=stream)

    get_logger("tests.logging").info("geocode_resolved", provider="mapbox")

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["event"] == "geocode_resolved"
    assert record["provider"] == "mapbox"
    assert record["level"] == "info"
    assert "timestamp" in record


def test_level_filtering(restore_logging: None) -> None:
    stream = io.StringIO()
    configure_logging(log_level="WARNING", json_output=True, stream=stream)

    logger = get_logger("tests.logging")
    logger.info("dropped")
    logger.warning("kept")

    output = stream.getvalue()
    assert "dropped" not in output
    assert "kept" in output


def test_stdlib_records_share_the_stream(restore_logging: None) -> None:
    stream = io.StringIO()
    configure_logging(log_level="INFO", json_output=True, stream=stream)

    logging.getLogger("some.library").warning("library warning")

    assert "library warning" in stream.getvalue()


def test_httpx_quieted(restore_logging: None) -> None:
    configure_logging(stream=io.StringIO())
    assert logging.getLogger("httpx").level == logging.WARNING
