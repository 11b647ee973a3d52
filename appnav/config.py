"""Persistent JSON config helpers.

Stores the minimal info-session record used to restore the surface after a
restart. All access is defensive: malformed or missing config falls back
safely.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

from .fs import read_json_object

logger = logging.getLogger(__name__)

APP_NAME = "appnav"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
SESSION_KEY = "session"
TARGET_FOLDER_KEY = "target_folder"


def load_config() -> dict[str, object]:
    """Read the config file; anything but a readable JSON object yields ``{}``."""
    return read_json_object(CONFIG_PATH)


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` as indented JSON, logging instead of raising on failure."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def load_session_record() -> str | None:
    """Return the persisted info-session target folder, or ``None`` when unset/invalid."""
    record = load_config().get(SESSION_KEY)
    if not isinstance(record, dict):
        return None
    value = record.get(TARGET_FOLDER_KEY)
    if not isinstance(value, str) or not value:
        return None
    return value


def save_session_record(target_folder: str | os.PathLike[str]) -> None:
    """Persist the info-session target folder verbatim as its only durable field."""
    text = os.fspath(target_folder)
    if not text:
        return
    config = load_config()
    config[SESSION_KEY] = {TARGET_FOLDER_KEY: text}
    save_config(config)


def clear_session_record() -> None:
    """Drop the persisted info-session record if present."""
    config = load_config()
    if SESSION_KEY not in config:
        return
    del config[SESSION_KEY]
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_session_record",
    "save_session_record",
    "clear_session_record",
]
