# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked sessions, pure functions)
- Integration tests (SQLite database, HTTP API)
"""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from gradebook.core.config import Settings, clear_settings_cache, get_settings

TEST_ENVIRONMENT = {
    "ENVIRONMENT": "test",
    "DEBUG": "false",
    "LOG_LEVEL": "WARNING",
    "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
    "JWT_ALGORITHM": "HS256",
    "GRADING_ENFORCE_WEIGHT_CEILING": "true",
    "GRADING_MAX_BATCH_SIZE": "500",
}


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Point every test at a fresh, test-only configuration.

    Yields:
        Settings loaded from the test environment.
    """
    for key, value in TEST_ENVIRONMENT.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    clear_settings_cache()
    yield get_settings()
    clear_settings_cache()


# =============================================================================
# Mock Session
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    return db
