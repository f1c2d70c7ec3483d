"""CLI commands via click's CliRunner, with the manager wired to MockTradeAPI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from trade_offer_manager import cli as cli_module
from trade_offer_manager.cli import cli
from trade_offer_manager.exceptions import APIStatusError
from trade_offer_manager.manager import TradeOfferManager
from trade_offer_manager.models.offers import OfferState

from tests.conftest import TEST_API_KEY
from tests.factories import make_offer


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(monkeypatch):
    for name in ("API_KEY", "API_URL", "TWO_FACTOR_SECRET", "POLL_INTERVAL",
                 "CANCEL_TIME", "DB_PATH"):
        monkeypatch.delenv(f"TRADE_OFFER_MANAGER_{name}", raising=False)
    monkeypatch.setenv("TRADE_OFFER_MANAGER_API_KEY", TEST_API_KEY)
    monkeypatch.setenv("TRADE_OFFER_MANAGER_DB_PATH", ":memory:")
    return monkeypatch


@pytest.fixture
def wired(env, mock_api):
    """Make every command build its manager on top of mock_api."""
    env.setattr(cli_module, "TradeOfferManager",
                lambda cfg: TradeOfferManager(cfg, api=mock_api))
    return mock_api


def test_status_shows_configuration(runner, env):
    env.setenv("TRADE_OFFER_MANAGER_CANCEL_TIME", "60000")

    result = runner.invoke(cli, ["status"])

    assert result.exit_code == 0
    assert "***configured***" in result.output
    assert TEST_API_KEY not in result.output
    assert "Poll interval: 5000ms" in result.output
    assert "Auto-cancel:   60000ms" in result.output


def test_commands_need_an_api_key(runner, env):
    env.delenv("TRADE_OFFER_MANAGER_API_KEY")

    result = runner.invoke(cli, ["offers"])

    assert result.exit_code == 1
    assert "No API key configured" in result.output


def test_offers_lists_one_page(runner, wired):
    wired.put(
        make_offer(id=11, sent_by_you=True, time_created=1_700_000_000),
        make_offer(id=12, state=OfferState.DECLINED, time_created=1_700_000_100),
    )

    result = runner.invoke(cli, ["offers"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("#12")
    assert "DECLINED" in lines[0]
    assert "received" in lines[0]
    assert "sent" in lines[1]


def test_offers_state_filter(runner, wired):
    wired.put(make_offer(id=1), make_offer(id=2, state=OfferState.EXPIRED, time_updated=200))

    result = runner.invoke(cli, ["offers", "--state", "expired"])

    assert result.exit_code == 0
    assert "#2" in result.output
    assert "#1 " not in result.output


def test_offers_empty(runner, wired):
    result = runner.invoke(cli, ["offers"])
    assert "No offers." in result.output


def test_offer_not_found_exits_with_error(runner, wired):
    result = runner.invoke(cli, ["offer", "404"])

    assert result.exit_code == 1
    assert "Error: Offer not found" in result.output


def test_cancel_with_yes(runner, wired):
    wired.put(make_offer(id=5, sent_by_you=True))

    result = runner.invoke(cli, ["cancel", "5", "--yes"])

    assert result.exit_code == 0
    assert wired.cancel_calls == [5]
    assert "Offer #5 is now CANCELED" in result.output


def test_cancel_aborts_without_confirmation(runner, wired):
    result = runner.invoke(cli, ["cancel", "5"], input="n\n")

    assert result.exit_code == 1
    assert wired.cancel_calls == []


def test_cancel_api_error(runner, wired):
    wired.put(make_offer(id=5, sent_by_you=True))
    wired.cancel_errors[5] = APIStatusError("Offer is not active")

    result = runner.invoke(cli, ["cancel", "5", "-y"])

    assert result.exit_code == 1
    assert "Error: Offer is not active" in result.output


def test_inventory(runner, wired):
    wired.inventory = [{"id": 1, "name": "Knife"}, {"id": 2, "name": "Gloves"}]

    result = runner.invoke(cli, ["inventory"])

    assert result.exit_code == 0
    assert "Knife" in result.output
    assert "2 items" in result.output


def test_user_inventory_by_uid(runner, wired):
    wired.user_inventories[42] = [{"id": 9, "name": "Sticker"}]

    result = runner.invoke(cli, ["inventory", "--user", "42"])

    assert result.exit_code == 0
    assert "Sticker" in result.output
