"""Workaround for control bytes Keploy writes into ``keploy.yml``.

Keploy record sometimes leaves binary garbage in its otherwise text-based
config file, which makes ``keploy sanitize`` fail to parse it. The file is
regenerated by Keploy, so a corrupted copy is deleted rather than repaired.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from keploy_workflow.artifacts import count_fixture_files
from keploy_workflow.exceptions import DataIntegrityError
from keploy_workflow.settings import WorkflowConfig

_LOGGER = logging.getLogger(__name__)

# C0 controls except tab, LF and CR, plus DEL
CONTROL_BYTES_PATTERN = re.compile(rb"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


@dataclass
class CorruptionResult:
    """Result of the corruption workaround.

    Attributes:
        config_found: True if the config file existed
        removed: True if the config file was deleted
        fixture_count: Fixture files remaining afterwards
    """

    config_found: bool = False
    removed: bool = False
    fixture_count: int = 0


def has_control_bytes(data: bytes) -> bool:
    """Check whether data contains disallowed control bytes.

    Args:
        data: Raw file content

    Returns:
        True if any byte in 0x00-0x08, 0x0B, 0x0C, 0x0E-0x1F or 0x7F is present
    """
    return CONTROL_BYTES_PATTERN.search(data) is not None


def remove_if_corrupted(path: Path) -> bool:
    """Delete ``path`` if it contains control bytes.

    Args:
        path: File to inspect

    Returns:
        True if the file was deleted, False if missing or clean
    """
    if not path.is_file():
        return False
    if not has_control_bytes(path.read_bytes()):
        return False
    path.unlink()
    return True


def fix_config_corruption(config: WorkflowConfig) -> CorruptionResult:
    """Remove a corrupted ``keploy.yml`` and check fixtures survived.

    Args:
        config: Workflow configuration

    Returns:
        CorruptionResult

    Raises:
        DataIntegrityError: If no fixture files remain afterwards
    """
    result = CorruptionResult()
    config_file = config.config_file

    if config_file.is_file():
        result.config_found = True
        _LOGGER.info("Found potentially corrupted %s file: %s", config.config_file_name, config_file)
        result.removed = remove_if_corrupted(config_file)
        if result.removed:
            _LOGGER.warning("Detected control characters in %s - removed corrupted file", config.config_file_name)
        else:
            _LOGGER.info("%s appears to be valid, keeping file", config.config_file_name)
    else:
        _LOGGER.info("No %s file found - this is expected", config.config_file_name)

    result.fixture_count = count_fixture_files(config.data_dir, config.fixture_pattern)
    if result.fixture_count == 0:
        raise DataIntegrityError("No test case files found after YAML cleanup", step="workaround")

    _LOGGER.info("Test case files are intact (%d files remaining)", result.fixture_count)
    return result
