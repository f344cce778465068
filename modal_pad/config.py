#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Configuration loading from ``config.toml``."""

import codecs
import copy
import logging
import os
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MODAL_PAD_CONFIG"
DEFAULT_CONFIG_PATH = "config.toml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "encoding": "utf-8",
        "detect_encoding": True,
        "escape_delay": 25,
    },
    "colors": {
        "status": "#C9D1D9",
        "message": "#C9D1D9",
        "error": "#F85149",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "",
    },
}


# --- Dictionary Deep Merge Utility ---
def deep_merge(base: Dict[Any, Any], override: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.

    If a key exists in both dictionaries and both values are dictionaries,
    the merge is performed recursively. Otherwise, the value from `override`
    replaces the value from `base`. Neither input is modified.

    Example:
        >>> deep_merge({'a': 1, 'b': {'x': 10, 'y': 20}}, {'b': {'y': 99}, 'c': 3})
        {'a': 1, 'b': {'x': 10, 'y': 99}, 'c': 3}
    """
    result = dict(base)
    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = override_value
    return result


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads and merges the application configuration, applying safe defaults.

    1. Starts from `DEFAULT_CONFIG`.
    2. Deep-merges the user's TOML file over it. The file is *path*, else
       the ``MODAL_PAD_CONFIG`` environment variable, else ``config.toml``
       in the working directory.
    3. Fills any default section or key the merge left out (for example
       when the user wrote ``editor = 1``).
    4. Replaces an unknown ``[editor] encoding`` or a non-integer
       ``escape_delay`` with its default.

    Missing files and TOML errors are logged and the defaults are used, so
    the function never raises.

    Returns:
        dict: The merged configuration.

    Example:
        >>> config = load_config("/nonexistent.toml")
        >>> config["editor"]["encoding"]
        'utf-8'
    """
    config_path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    user_config: Dict[str, Any] = {}

    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as fh:
                user_config = toml.loads(fh.read())
            logger.debug("Loaded user config from %s", config_path)
        except toml.TomlDecodeError as exc:
            logger.error("TOML parse error in %s: %s – using defaults.", config_path, exc)
        except Exception as exc:
            logger.error("Unexpected error reading %s: %s – using defaults.", config_path, exc)
    else:
        logger.debug("Config file %s not found – using defaults.", config_path)

    final_config = deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

    for section, default_val in DEFAULT_CONFIG.items():
        if not isinstance(final_config.get(section), dict):
            logger.warning("Config section [%s] is malformed – using defaults.", section)
            final_config[section] = copy.deepcopy(default_val)
            continue
        for sub_key, sub_val in default_val.items():
            final_config[section].setdefault(sub_key, sub_val)

    _repair_editor_section(final_config["editor"])
    return final_config


def _repair_editor_section(editor_config: Dict[str, Any]) -> None:
    defaults = DEFAULT_CONFIG["editor"]

    encoding = editor_config.get("encoding")
    try:
        codecs.lookup(encoding)
    except (LookupError, TypeError):
        logger.warning("Unknown encoding %r in [editor] – using %s.", encoding, defaults["encoding"])
        editor_config["encoding"] = defaults["encoding"]

    delay = editor_config.get("escape_delay")
    if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
        logger.warning("Invalid escape_delay %r in [editor] – using %d ms.", delay, defaults["escape_delay"])
        editor_config["escape_delay"] = defaults["escape_delay"]
