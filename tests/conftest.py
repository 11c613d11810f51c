"""
Pytest fixtures for the docbind test suite.

Provides:
- Structured logging configured once per session
- LogContext and SchemaRegistry isolation between tests
- captured_logs fixture returning docbind log lines as dicts
"""

import json
import logging
from io import StringIO

import pytest

from docbind_kernel.domain.schema_registry import SchemaRegistry
from docbind_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture docbind logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            resolve(attribute, ["x"])
            logs = captured_logs()
            assert any(r["message"] == "attribute_resolved" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("docbind")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Registry isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_schema_registry():
    """Each test starts with an empty, unfrozen SchemaRegistry."""
    SchemaRegistry.clear()
    yield
    SchemaRegistry.clear()
