"""
Pytest fixtures for the sales document test suite.

Provides:
- Structured logging configured at DEBUG for every test session
- LogContext isolation between tests
- ``captured_logs`` for asserting on emitted JSON log records
- In-memory collaborators for ``OrderDocumentService``
"""

import json
import logging
from io import StringIO

import pytest

from sales_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from tests.doubles import DraftConvertor, FixedTaxDisplay, RecordingTotalsCollector


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
    Capture sales_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.prepare_invoice()
            logs = captured_logs()
            assert any(r["message"] == "invoice_prepared" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sales_kernel")
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
# Collaborator fixtures
# =============================================================================


@pytest.fixture
def convertor():
    return DraftConvertor()


@pytest.fixture
def totals_collector():
    return RecordingTotalsCollector()


@pytest.fixture
def tax_display():
    return FixedTaxDisplay(shipping_includes_tax=False)
