"""Pre-storage bootstrap configuration. Zero imports from the rest of the app.

Stores preferences that must be known before the ledger database is opened
(db_folder) or before anything logs (log_level).
Config lives in ~/.pocket_ledger/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".pocket_ledger"
CONFIG_FILE = CONFIG_DIR / "config.json"

LOG_LEVEL_ENV = "POCKET_LEDGER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates ~/.pocket_ledger/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_log_level() -> str:
    """Env var wins over config file; falls back to INFO."""
    return (
        os.getenv(LOG_LEVEL_ENV)
        or load_config().get("log_level")
        or DEFAULT_LOG_LEVEL
    ).upper()


def set_log_level(level: str | None) -> None:
    config = load_config()
    if level is None:
        config.pop("log_level", None)
    else:
        config["log_level"] = level.upper()
    save_config(config)
