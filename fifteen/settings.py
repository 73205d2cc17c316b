"""
Settings Module for the Fifteen Puzzle Solver

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from fifteen.solver import get_default_strategy_name, get_strategy_names

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "strategy_name": get_default_strategy_name(),
    "comparison_mode": False,
    "move_delay_ms": 300,
    "progress_interval_ms": 100,
    "comparison_pause_ms": 500,
    "single_timeout_sec": 60.0,
}


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file (SETTINGS_FILE if None)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = path or SETTINGS_FILE
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError(f"expected a JSON object, got {type(settings).__name__}")

        # Merge with defaults to handle missing or mistyped keys
        result = DEFAULT_SETTINGS.copy()
        for key, value in settings.items():
            if key in DEFAULT_SETTINGS and not _same_kind(value, DEFAULT_SETTINGS[key]):
                logger.warning(f"Ignoring setting {key}={value!r}, using default")
                continue
            result[key] = value

        if result["strategy_name"] not in get_strategy_names():
            logger.warning(f"Unknown strategy in settings: {result['strategy_name']}")
            result["strategy_name"] = get_default_strategy_name()

        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file (SETTINGS_FILE if None)
    """
    path = path or SETTINGS_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def _same_kind(value: Any, default: Any) -> bool:
    """Check value against the type of its default; ints and floats are interchangeable."""
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))
