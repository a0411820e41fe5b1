"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from helpers import make_gmail_message
from vehicle_insight.exceptions import QueryFailure


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from vehicle_insight.config import Settings

    return Settings(
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def queries(mock_settings) -> list[str]:
    from vehicle_insight.gmail.search import build_search_queries

    return build_search_queries(mock_settings)


@pytest.fixture
def sample_email_data() -> dict[str, Any]:
    """Provide a sample notification in Gmail API format."""
    return make_gmail_message("msg123456")


@pytest.fixture
def failing_query() -> QueryFailure:
    return QueryFailure("Backend Error")


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
