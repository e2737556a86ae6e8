# edim/utils/utils.py
"""
edim.utils.utils
================

Core utility functions for the edim editor.

- User configuration: creates ``config.toml`` and ``.env`` templates in
  ``~/.config/edim`` on first run.
- Configuration loading: starts from the embedded ``DEFAULT_CONFIG`` and
  recursively merges the user's ``config.toml`` over it.
- Helpers for deep-merging dictionaries and converting hex colours to xterm
  indices.

A missing or corrupt user file never stops the editor from starting; the
embedded defaults are used instead.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("edim")

# --- Constants ---
WHITE_FG_IDX = 255

CONFIG_DIR_NAME = "edim"

ENV_TEMPLATE = """# Environment for the edim editor.
# Set to 1 to record every key press in keytrace.log.
EDIM_KEYTRACE=0
"""

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {"tab_size": 4, "status_timeout": 50},
    "colors": {
        "default": "#FFFFFF",
        "keyword": "#00FFFF",
        "string": "#00FF00",
        "number": "#FF00FF",
        "comment": "#FFFF00",
        "status": "#FFFFFF",
    },
    "keybindings": {
        "save_file": "ctrl+s",
        "quit": "ctrl+q",
        "handle_enter": ["enter", 10, 13],
        "handle_tab": "tab",
        "handle_backspace": ["backspace", 8, 127],
        "handle_up": ["up"],
        "handle_down": ["down"],
        "handle_left": ["left"],
        "handle_right": ["right"],
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "editor.log",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Create ``config.toml`` and ``.env`` templates when they are missing."""
    try:
        config_dir = config_dir or get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with user_config_path.open("w", encoding="utf-8") as f:
                toml.dump(DEFAULT_CONFIG, f)
            logger.info("Created user config template at: %s", user_config_path)

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info("Created user .env template at: %s", user_env_path)

    except Exception as e:
        logger.critical("Could not create user configuration files: %s", e, exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the embedded defaults and merge the user's config.toml over them.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    config_dir = config_dir or get_config_dir()
    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info("Successfully loaded and merged user config from %s", user_config_path)
        except Exception as e:
            logger.error("Could not parse user config '%s': %s. Using defaults.", user_config_path, e)

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
