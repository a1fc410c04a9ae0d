"""
Pytest fixtures for the mirath test suite.

Provides:
- The bundled rule book, loaded once per session
- A cache-less DistributionEngine (so every test exercises the pipeline)
- Helpers to build a DistributionContext for stage-level tests
"""

import logging

import pytest

from mirath_config import get_rule_book
from mirath_engines.context import DistributionContext
from mirath_engines.distribution import DistributionEngine
from mirath_engines.normalization import normalize_input
from mirath_kernel.domain import Estate
from mirath_kernel.logging_config import LogContext, configure_logging, reset_logging


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


@pytest.fixture(scope="session")
def rule_book():
    return get_rule_book()


@pytest.fixture
def engine(rule_book):
    return DistributionEngine(rule_book=rule_book)


@pytest.fixture
def make_context(rule_book):
    """Build a fresh DistributionContext from raw heirs for stage-level tests."""

    def _make(madhab="shafii", total=120000, **heirs):
        normalized = normalize_input(Estate(total=total), heirs, rule_book)
        return DistributionContext.start(
            rule_book, rule_book.madhab(madhab), normalized.estate, normalized.heirs
        )

    return _make
