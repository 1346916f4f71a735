"""Test configuration hooks."""

from __future__ import annotations

import logging

import pytest


# Configure anyio to only use asyncio backend (skip trio tests)
@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Provide a sleep replacement for backoff tests."""
    return RecordingSleep()


@pytest.fixture
def reset_logging():
    """Restore root logging state after tests that call setup_logging."""
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.root.handlers = original_handlers
    logging.root.setLevel(original_level)
    from weblookup.core import logger

    logger._loggers.clear()
    logger._configured = False
