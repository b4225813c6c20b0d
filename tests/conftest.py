"""
AuthCore - Pytest Configuration
Fixtures partagées pour tous les tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from authcore.auth import InMemoryCredentialStore, TokenIssuer, TokenLifecycleManager
from authcore.logging import LogConfig, LogLevel, StructuredLogger

TEST_ACCESS_SECRET = "test-access-secret-key-that-is-long-enough-32"
TEST_RENEWAL_SECRET = "test-renewal-secret-key-that-is-long-enough-32"


class FakeClock:
    """Horloge UTC contrôlable."""

    def __init__(self, start: datetime = None) -> None:
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def issuer() -> TokenIssuer:
    """Émetteur avec secrets distincts access / renewal."""
    return TokenIssuer(access_secret=TEST_ACCESS_SECRET, renewal_secret=TEST_RENEWAL_SECRET)


@pytest.fixture
def log_lines() -> List[str]:
    return []


@pytest.fixture
def capturing_logger(log_lines) -> StructuredLogger:
    """Logger DEBUG qui capture les entrées et les lignes JSON."""
    return StructuredLogger(
        "authcore.tests",
        config=LogConfig(min_level=LogLevel.DEBUG, capture_entries=True),
        output_handler=lambda entry, line: log_lines.append(line),
    )


@pytest.fixture
def store(clock) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(clock=clock)


@pytest.fixture
def manager(issuer, store, clock, capturing_logger) -> TokenLifecycleManager:
    return TokenLifecycleManager(issuer, store, clock=clock, logger=capturing_logger)
