"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from sorokit.errors import ConfigError
from sorokit.models.config import NETWORKS, ClientConfig, PollerConfig

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _number(section: str, key: str, value: Any, kind: type = float) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"[{section}] {key} must be a number, got {value!r}") from None


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "SOROKIT_",
) -> ClientConfig:
    """Load client configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (SOROKIT_RPC_URL, etc.)
        2. TOML config file
        3. Defaults from ClientConfig / the selected network
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                try:
                    raw = tomllib.load(f)
                except tomllib.TOMLDecodeError as exc:
                    raise ConfigError(f"invalid TOML in {p}: {exc}") from exc

    client: dict[str, Any] = {}

    # ── Client section ─────────────────────────────────────
    section = raw.get("client", {})
    for key in ("network", "rpc_url", "network_passphrase", "contract_id", "log_level"):
        if v := section.get(key):
            client[key] = str(v)
    if (v := section.get("start_ledger")) is not None:
        client["start_ledger"] = _number("client", "start_ledger", v, int)

    # ── Poller section ─────────────────────────────────────
    poller = PollerConfig()
    section = raw.get("poller", {})
    if (v := section.get("poll_interval")) is not None:
        poller.poll_interval = _number("poller", "poll_interval", v) or None
    if (v := section.get("limit")) is not None:
        poller.limit = _number("poller", "limit", v, int)
    if (v := section.get("max_retries")) is not None:
        poller.max_retries = _number("poller", "max_retries", v, int)
    if (v := section.get("backoff_base")) is not None:
        poller.backoff_base = _number("poller", "backoff_base", v)
    if (v := section.get("error_multiplier")) is not None:
        poller.error_multiplier = _number("poller", "error_multiplier", v, int)

    # ── Environment variable overrides (highest priority) ──
    if net := os.environ.get(f"{env_prefix}NETWORK"):
        client["network"] = net
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        client["rpc_url"] = rpc
    if cid := os.environ.get(f"{env_prefix}CONTRACT_ID"):
        client["contract_id"] = cid
    if level := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        client["log_level"] = level
    if (interval := os.environ.get(f"{env_prefix}POLL_INTERVAL")) is not None:
        poller.poll_interval = _number("env", f"{env_prefix}POLL_INTERVAL", interval) or None

    if poller.limit < 1:
        raise ConfigError(f"[poller] limit must be positive, got {poller.limit}")
    if poller.max_retries < 1:
        raise ConfigError(f"[poller] max_retries must be positive, got {poller.max_retries}")

    cfg = ClientConfig(poller=poller, **client)
    if cfg.network not in NETWORKS and not (cfg.rpc_url and cfg.network_passphrase):
        raise ConfigError(
            f"unknown network {cfg.network!r}; set rpc_url and network_passphrase "
            f"or use one of: {', '.join(sorted(NETWORKS))}"
        )
    return cfg


def setup_logging(level: str = "info") -> None:
    """Configure root logging in the package's standard format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def configure(
    config_path: str | Path | None = None,
    env_prefix: str = "SOROKIT_",
) -> ClientConfig:
    """Load configuration and apply its log level. Entry point for applications."""
    cfg = load_config(config_path, env_prefix)
    setup_logging(cfg.log_level)
    log.debug("Loaded config for %s (rpc=%s)", cfg.network, cfg.rpc_url)
    return cfg
