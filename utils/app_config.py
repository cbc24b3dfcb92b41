"""Bootstrap configuration. Zero imports from models or services.

Stores user preferences the engine needs before any ledger is loaded
(recurrence horizon, trend window, currency symbol). Config lives in
~/.finance_tracker/config.json unless FINANCE_TRACKER_CONFIG points elsewhere.
"""
import json
import logging
import os
from pathlib import Path

from utils.constants import (
    CONFIG_DIR_NAME,
    CONFIG_ENV_VAR,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_HORIZON_MONTHS,
    DEFAULT_TREND_MONTHS,
)

logger = logging.getLogger(__name__)

DEFAULTS = {
    "recurrence_horizon_months": DEFAULT_HORIZON_MONTHS,
    "trend_months": DEFAULT_TREND_MONTHS,
    "currency_symbol": DEFAULT_CURRENCY_SYMBOL,
}


def config_file() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / CONFIG_DIR_NAME / "config.json"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    path = config_file()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return data


def save_config(config: dict) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    path = config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def _positive_int(key: str) -> int:
    value = load_config().get(key, DEFAULTS[key])
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning("Config %s=%r is not an integer, using %s", key, value, DEFAULTS[key])
        return DEFAULTS[key]
    if value < 1:
        logger.warning("Config %s=%r must be positive, using %s", key, value, DEFAULTS[key])
        return DEFAULTS[key]
    return value


def get_horizon_months() -> int:
    """How many months ahead recurring transactions are materialized."""
    return _positive_int("recurrence_horizon_months")


def get_trend_months() -> int:
    return _positive_int("trend_months")


def get_currency_symbol() -> str:
    return str(load_config().get("currency_symbol", DEFAULT_CURRENCY_SYMBOL))


def set_option(key: str, value) -> None:
    """Update a single key in config and save."""
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)
