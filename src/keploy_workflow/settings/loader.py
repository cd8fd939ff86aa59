"""Settings loading utilities.

This module loads the built-in workflow settings from ``workflow.json`` and
merges an optional user settings file over them.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from keploy_workflow.exceptions import SettingsError

_LOGGER = logging.getLogger(__name__)

_BUILTIN_FILENAME = "workflow.json"


def _get_builtin_path(filename: str = _BUILTIN_FILENAME) -> Path:
    """Get path to a built-in settings file."""
    return Path(__file__).parent / filename


def load_json_file(path: Path | str) -> dict[str, Any]:
    """Load a JSON file with error handling.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON data

    Raises:
        SettingsError: If file cannot be read or parsed, or is not a JSON object
    """
    path_str = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SettingsError(f"Settings file not found: {path_str}") from e
    except PermissionError as e:
        raise SettingsError(f"Permission denied reading settings file: {path_str}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"Invalid JSON in settings file {path_str}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path_str} must contain a JSON object")
    return data


def _merge_settings(builtin: dict[str, Any], custom: dict[str, Any], source: str) -> dict[str, Any]:
    """Merge custom settings over the built-in ones.

    Keys starting with ``_`` are comments and ignored. ``metadata`` is merged
    key by key; every other key replaces the built-in value.

    Raises:
        SettingsError: If the custom file names an unknown setting
    """
    merged = copy.deepcopy(builtin)
    for key, value in custom.items():
        if key.startswith("_"):
            continue
        if key not in builtin:
            raise SettingsError(f"Unknown setting {key!r} in {source}")
        if key == "metadata":
            if not isinstance(value, dict):
                raise SettingsError(f"Setting 'metadata' in {source} must be an object")
            merged["metadata"].update(value)
        else:
            merged[key] = value
    return merged


def load_workflow_settings(custom_path: Path | str | None = None) -> dict[str, Any]:
    """Load workflow settings.

    Args:
        custom_path: Optional path to a custom settings file to merge

    Returns:
        Dict of settings keyed like ``workflow.json`` (comment keys removed)

    Raises:
        SettingsError: If a settings file cannot be loaded
    """
    builtin = {
        key: value
        for key, value in load_json_file(_get_builtin_path()).items()
        if not key.startswith("_")
    }

    if custom_path:
        custom = load_json_file(custom_path)
        builtin = _merge_settings(builtin, custom, str(custom_path))
        _LOGGER.debug("Merged settings from %s", custom_path)

    return builtin
