"""Shared test fixtures."""

import os

# Settings() requires JWT_SECRET at import time
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from src.pm_common.locks import MarketLocks  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeAssetTransfer,
    FakeClock,
    FakePriceOracle,
    FakeSession,
    InMemoryMarketRepository,
    InMemoryPositionRepository,
)

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def market_repo() -> InMemoryMarketRepository:
    return InMemoryMarketRepository()


@pytest.fixture
def position_repo() -> InMemoryPositionRepository:
    return InMemoryPositionRepository()


@pytest.fixture
def transfer() -> FakeAssetTransfer:
    return FakeAssetTransfer()


@pytest.fixture
def oracle(clock: FakeClock) -> FakePriceOracle:
    return FakePriceOracle(clock)


@pytest.fixture
def locks() -> MarketLocks:
    return MarketLocks()


@pytest.fixture
def expiry() -> datetime:
    return T0 + timedelta(days=1)
