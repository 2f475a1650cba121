"""
Settings Module for the Gas Meter Reader

Provides persistent storage for reader configuration using JSON.
Settings are stored in config.json in the working directory.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from .meter import DIGIT_SLOTS, RESULT_SUFFIX
from .result import DigitSlot

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "template_dir": "templates",
    "digit_slots": [[s.x, s.y, s.width, s.height] for s in DIGIT_SLOTS],
    "output_suffix": RESULT_SUFFIX,
    "debug_enabled": False,
    "debug_dir": "debug",
}


def load_settings(path: Union[str, Path] = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file location

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError("top-level value must be an object")

        # Merge with defaults to handle missing keys
        result = copy.deepcopy(DEFAULT_SETTINGS)
        result.update(settings)

        suffix = result["output_suffix"]
        if not isinstance(suffix, str) or not suffix.startswith(".") or len(suffix) < 2:
            logger.warning(f"Invalid output_suffix {suffix!r}, using {RESULT_SUFFIX}")
            result["output_suffix"] = RESULT_SUFFIX

        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)


def save_settings(settings: Dict[str, Any], path: Union[str, Path] = SETTINGS_FILE) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file location
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def digit_slots_from_settings(settings: Dict[str, Any]) -> List[DigitSlot]:
    """Build DigitSlot objects from the [x, y, width, height] lists in settings."""
    return [DigitSlot(*map(int, rect)) for rect in settings["digit_slots"]]
