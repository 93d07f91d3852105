"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Iterator

import pytest

from projsync.retry import RetryExecutor


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")


@pytest.fixture
def sleeps() -> list[float]:
    """Records the delays passed to a RetryExecutor instead of sleeping."""
    return []


@pytest.fixture
def executor(sleeps: list[float]) -> RetryExecutor:
    """RetryExecutor that never actually waits."""
    return RetryExecutor(sleep=sleeps.append)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep real credentials out of tests."""
    for name in ("GITHUB_TOKEN", "PROJSYNC_OWNER", "PROJSYNC_LOG_DIR", "PROJSYNC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_projsync_logger() -> Iterator[None]:
    """Undo setup_logging() so levels and handlers don't leak between tests."""
    yield
    logger = logging.getLogger("projsync")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
