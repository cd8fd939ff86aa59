"""Prerequisite checks run before any destructive step."""

from __future__ import annotations

import logging
from pathlib import Path

from keploy_workflow.exceptions import PrerequisiteError
from keploy_workflow.settings import WorkflowConfig

_LOGGER = logging.getLogger(__name__)


def _path_exists(path: Path, kind: str) -> bool:
    if kind == "dir":
        return path.is_dir()
    return path.is_file()


def check_prerequisites(config: WorkflowConfig) -> None:
    """Verify the Keploy binary, project, entry point and interpreter exist.

    Args:
        config: Workflow configuration

    Raises:
        PrerequisiteError: For the first required path that is missing
    """
    _LOGGER.info("Checking prerequisites...")

    for description, path, kind in config.required_paths:
        if not _path_exists(path, kind):
            raise PrerequisiteError(f"{description} not found at: {path}", path=path)
        _LOGGER.debug("Found %s: %s", description, path)
