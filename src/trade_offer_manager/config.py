"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from trade_offer_manager.exceptions import ConfigError
from trade_offer_manager.models.config import ManagerConfig


def _int_or_none(value: object, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer number of milliseconds") from exc


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "TRADE_OFFER_MANAGER_",
) -> ManagerConfig:
    """Load manager configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (TRADE_OFFER_MANAGER_API_KEY, etc.)
        2. TOML config file
        3. Defaults from ManagerConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = ManagerConfig()

    # ── API section ────────────────────────────────────────
    api = raw.get("api", {})
    if v := api.get("key"):
        cfg.api_key = str(v)
    if v := api.get("url"):
        cfg.api_url = str(v)
    if v := api.get("timeout"):
        cfg.request_timeout = float(v)

    # ── Two-factor section ─────────────────────────────────
    two_factor = raw.get("two_factor", {})
    if v := two_factor.get("secret"):
        cfg.two_factor_secret = str(v)

    # ── Polling section ────────────────────────────────────
    polling = raw.get("polling", {})
    if (v := _int_or_none(polling.get("interval"), "polling.interval")) is not None:
        cfg.poll_interval = v
    if "cancel_time" in polling:
        cfg.cancel_time = _int_or_none(polling["cancel_time"], "polling.cancel_time")

    # ── Daemon section ─────────────────────────────────────
    daemon = raw.get("daemon", {})
    if v := daemon.get("log_level"):
        cfg.log_level = str(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Environment variable overrides (highest priority) ──
    if key := os.environ.get(f"{env_prefix}API_KEY"):
        cfg.api_key = key
    if url := os.environ.get(f"{env_prefix}API_URL"):
        cfg.api_url = url
    if secret := os.environ.get(f"{env_prefix}TWO_FACTOR_SECRET"):
        cfg.two_factor_secret = secret
    if interval := os.environ.get(f"{env_prefix}POLL_INTERVAL"):
        cfg.poll_interval = _int_or_none(interval, f"{env_prefix}POLL_INTERVAL")
    if cancel := os.environ.get(f"{env_prefix}CANCEL_TIME"):
        cfg.cancel_time = _int_or_none(cancel, f"{env_prefix}CANCEL_TIME")
    if db_path := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db_path

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
