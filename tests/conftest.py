"""Shared fixtures for trade_offer_manager tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from trade_offer_manager.events import EventSink
from trade_offer_manager.manager import TradeOfferManager
from trade_offer_manager.models.config import ManagerConfig
from trade_offer_manager.storage.sqlite import SQLiteSnapshotStore

from tests.mocks import EventRecorder, FakeClock, MockCodeSource, MockTradeAPI

TEST_API_KEY = "0123456789abcdef0123456789abcd"
TEST_2FA_SECRET = "JBSWY3DPEHPK3PXP"
TEST_STEAM_ID = "76561198000000042"

# Wall clock used by cancellation tests (epoch seconds).
NOW = 1_700_000_000


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add the API under test to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Trade API"] = "mocked (MockTradeAPI / httpx.MockTransport / local aiohttp)"


def make_test_config(**overrides) -> ManagerConfig:
    """Build a ManagerConfig suitable for testing."""
    defaults = dict(
        api_key=TEST_API_KEY,
        api_url="https://api-trade.test",
        request_timeout=5.0,
        two_factor_secret=TEST_2FA_SECRET,
        poll_interval=5000,
        cancel_time=None,
        db_path=":memory:",
    )
    defaults.update(overrides)
    return ManagerConfig(**defaults)


@pytest.fixture
def test_config():
    """Default ManagerConfig for tests."""
    return make_test_config()


@pytest.fixture
def mock_api():
    return MockTradeAPI()


@pytest.fixture
def code_source():
    return MockCodeSource()


@pytest.fixture
def clock():
    """Monotonic clock for the scheduler."""
    return FakeClock(1000.0)


@pytest.fixture
def wall_clock():
    """Epoch clock for auto-cancel decisions."""
    return FakeClock(float(NOW))


@pytest.fixture
def sink():
    return EventSink()


@pytest.fixture
def recorder(sink):
    return EventRecorder(sink)


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteSnapshotStore."""
    s = SQLiteSnapshotStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def manager(test_config, mock_api, code_source, sink, clock, wall_clock):
    """TradeOfferManager wired to mocks. Not started; drive it with poll()."""
    return TradeOfferManager(
        test_config,
        api=mock_api,
        code_source=code_source,
        events=sink,
        clock=clock,
        wall_clock=wall_clock,
    )


@pytest.fixture
def poll(manager, clock):
    """Run one poll cycle, stepping the clock past the minimum interval first."""

    async def _poll() -> bool:
        clock.advance(5)
        return await manager.poll_now()

    return _poll
