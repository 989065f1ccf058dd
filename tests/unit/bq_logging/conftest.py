"""Fixtures for BigQuery logging unit tests."""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict

import pytest

from bq_logging.config import load_settings, reset_settings
from bq_logging.metrics import reset_metrics
from bq_logging.sink import BigQuerySink
from bq_logging.sinks.memory import InMemoryTable


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `logging` marker."""

    for item in items:
        item.add_marker(pytest.mark.logging)


@pytest.fixture(autouse=True)
def _reset_sink_state():
    """Reset module level settings and metrics around each test."""

    reset_settings()
    reset_metrics()
    yield
    reset_metrics()
    reset_settings()


@pytest.fixture
def sink_settings():
    """Provide deterministic settings for a sink writing to ``proj.logs_ds.app_logs``."""

    return load_settings(
        {
            "BQ_LOG_PROJECT": "proj",
            "BQ_LOG_DATASET": "logs_ds",
            "BQ_LOG_TABLE": "app_logs",
            "BQ_LOG_LEVEL": "INFO",
            "BQ_LOG_FIELD_MAP": "datetime=logged_at",
            "BQ_LOG_CUSTOM_FIELDS": "env=test",
        }
    )


@pytest.fixture
def memory_table():
    return InMemoryTable()


@pytest.fixture
def sink(memory_table):
    """Sink over the in-memory table with no custom fields or renames."""

    return BigQuerySink(memory_table)


@pytest.fixture
def make_record():
    """Factory for canonical log records."""

    def _make(message: str = "boot", **overrides: Any) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "channel": "app",
            "message": message,
            "level": 200,
            "level_name": "INFO",
            "context": {},
            "extra": {},
            "datetime": _dt.datetime(2024, 6, 1, 12, 0, 0, tzinfo=_dt.timezone.utc),
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def isolated_logger(request):
    """A non-propagating stdlib logger with handlers removed on teardown."""

    logger = logging.getLogger(f"tests.bq_logging.{request.node.name}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    yield logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
