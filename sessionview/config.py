"""Persistent JSON config helpers.

Stores the wheel/arrow scroll step and display preferences.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .scroll import SCROLL_STEP

logger = logging.getLogger(__name__)

APP_NAME = "sessionview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

MIN_SCROLL_STEP = 1
MAX_SCROLL_STEP = 10
DEFAULT_STYLE = "ansi"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored so a
    read-only config directory never interrupts the viewer.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def clamp_scroll_step(value: int) -> int:
    return max(MIN_SCROLL_STEP, min(MAX_SCROLL_STEP, value))


def load_scroll_step() -> int:
    """Return the persisted scroll step.

    Booleans, non-integers, and out-of-range values fall back to the default.
    """
    value = load_config().get("scroll_step")
    if isinstance(value, bool) or not isinstance(value, int):
        return SCROLL_STEP
    if not MIN_SCROLL_STEP <= value <= MAX_SCROLL_STEP:
        return SCROLL_STEP
    return value


def save_scroll_step(step: int) -> None:
    config = load_config()
    config["scroll_step"] = clamp_scroll_step(int(step))
    save_config(config)


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def load_style() -> str:
    """Return the persisted highlight style name (``ansi`` or a Pygments style)."""
    return _load_string("style") or DEFAULT_STYLE


def load_theme_name() -> str | None:
    return _load_string("theme")
