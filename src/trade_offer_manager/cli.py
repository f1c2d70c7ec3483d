"""CLI entry point for the trade offer manager."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone

import click

from trade_offer_manager.config import load_config
from trade_offer_manager.daemon import run_daemon
from trade_offer_manager.exceptions import TradeOfferError
from trade_offer_manager.manager import TradeOfferManager
from trade_offer_manager.models.offers import Offer, OfferState, state_name


def _require_api_key(cfg):
    """Exit with error if no API key is configured."""
    if not cfg.api_key:
        click.echo("Error: No API key configured.", err=True)
        click.echo("Set TRADE_OFFER_MANAGER_API_KEY env var or [api] key in config.", err=True)
        sys.exit(1)


def _ts(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _offer_line(offer: Offer) -> str:
    direction = "sent" if offer.sent_by_you else "received"
    return (
        f"#{offer.id:<10} {state_name(offer.state):<13} {direction:<9} "
        f"updated {_ts(offer.time_updated)}"
    )


def _run(ctx: click.Context, coro) -> None:
    """Run a manager coroutine, turning API errors into a clean exit."""
    try:
        asyncio.run(coro)
    except TradeOfferError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def _user(value: str) -> int | str:
    # Short numeric values are platform uids; SteamID64s are 17 digits.
    if value.isdigit() and len(value) < 17:
        return int(value)
    return value


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """trade-offer-manager - poll trade offers and react to state changes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Daemon ─────────────────────────────────────────────


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start polling and log offer events until interrupted."""
    cfg = load_config(ctx.obj["config_path"])
    _require_api_key(cfg)

    click.echo(f"Starting trade offer daemon (interval: {cfg.poll_interval}ms)")
    asyncio.run(run_daemon(cfg))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    cfg = load_config(ctx.obj["config_path"])
    cancel = f"{cfg.cancel_time}ms" if (cfg.cancel_time or 0) > 0 else "(off)"
    click.echo(f"API URL:       {cfg.api_url}")
    click.echo(f"API key:       {'***configured***' if cfg.api_key else '(not set)'}")
    click.echo(f"2FA secret:    {'***configured***' if cfg.two_factor_secret else '(not set)'}")
    click.echo(f"Poll interval: {cfg.poll_interval}ms")
    click.echo(f"Auto-cancel:   {cancel}")
    click.echo(f"DB path:       {cfg.db_path}")


# ── Offers ─────────────────────────────────────────────


@cli.command()
@click.option(
    "--state",
    type=click.Choice([s.name.lower() for s in OfferState]),
    default=None,
    help="Only list offers in this state",
)
@click.option("--page", type=int, default=1, show_default=True)
@click.pass_context
def offers(ctx: click.Context, state: str | None, page: int) -> None:
    """List one page of trade offers."""
    cfg = load_config(ctx.obj["config_path"])
    _require_api_key(cfg)
    manager = TradeOfferManager(cfg)
    offer_state = OfferState[state.upper()] if state else None

    async def _offers():
        result = await manager.get_offers(state=offer_state, page=page)
        if not result:
            click.echo("No offers.")
        for offer in result:
            click.echo(_offer_line(offer))

    _run(ctx, _offers())


@cli.command()
@click.argument("offer_id", type=int)
@click.pass_context
def offer(ctx: click.Context, offer_id: int) -> None:
    """Show a single offer."""
    cfg = load_config(ctx.obj["config_path"])
    _require_api_key(cfg)
    manager = TradeOfferManager(cfg)

    async def _offer():
        result = await manager.get_offer(offer_id)
        click.echo(_offer_line(result))
        if message := result.payload.get("message"):
            click.echo(f"  Message: {message}")

    _run(ctx, _offer())


@cli.command()
@click.argument("offer_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def cancel(ctx: click.Context, offer_id: int, yes: bool) -> None:
    """Cancel a sent offer."""
    cfg = load_config(ctx.obj["config_path"])
    _require_api_key(cfg)
    if not yes:
        click.confirm(f"Cancel offer #{offer_id}?", abort=True)
    manager = TradeOfferManager(cfg)

    async def _cancel():
        result = await manager.cancel_offer(offer_id)
        click.echo(f"Offer #{result.id} is now {state_name(result.state)}")

    _run(ctx, _cancel())


# ── Inventory ──────────────────────────────────────────


@cli.command()
@click.option("--app-id", type=int, default=None, help="Only items of this app")
@click.option("--user", default=None, help="uid or SteamID64 of another user")
@click.pass_context
def inventory(ctx: click.Context, app_id: int | None, user: str | None) -> None:
    """List all items in our inventory, or in another user's."""
    cfg = load_config(ctx.obj["config_path"])
    _require_api_key(cfg)
    manager = TradeOfferManager(cfg)

    async def _inventory():
        if user:
            items = await manager.get_user_inventory(_user(user), app_id=app_id)
        else:
            items = await manager.get_inventory(app_id=app_id)
        for item in items:
            click.echo(f"{item.get('id', '?'):<12} {item.get('name', '')}")
        click.echo(f"{len(items)} items")

    _run(ctx, _inventory())
