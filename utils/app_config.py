"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores preferences that must be known before opening the DB (db_folder,
log_level). Config lives in ~/.duebook/config.json to avoid a bootstrapping
problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".duebook"
CONFIG_FILE = CONFIG_DIR / "config.json"


def load_config(path: Path | None = None) -> dict:
    """Returns {} on a missing or corrupt file."""
    try:
        with open(path or CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, ValueError):
        return {}


def save_config(config: dict, path: Path | None = None) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = Path(path or CONFIG_FILE)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
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
    return str(load_config().get("log_level", "INFO"))
