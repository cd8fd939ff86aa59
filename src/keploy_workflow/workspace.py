"""Removal of the fixture directory left by a previous run."""

from __future__ import annotations

import logging
import shutil

from keploy_workflow.artifacts import find_secret_reports
from keploy_workflow.settings import WorkflowConfig

_LOGGER = logging.getLogger(__name__)


def clean_workspace(config: WorkflowConfig) -> bool:
    """Delete the fixture directory so recording starts from scratch.

    Leftover secret reports are removed with it, otherwise Keploy would skip
    re-sanitizing the new fixtures.

    Args:
        config: Workflow configuration

    Returns:
        True if a directory was removed, False if there was nothing to clean
    """
    data_dir = config.data_dir
    if not data_dir.is_dir():
        _LOGGER.info("No existing %s directory found, skipping cleanup", config.data_dir_name)
        return False

    _LOGGER.info("Removing existing %s directory: %s", config.data_dir_name, data_dir)
    if find_secret_reports(data_dir, config.secret_report_name):
        _LOGGER.info("Found existing %s files - removing for fresh sanitization", config.secret_report_name)

    try:
        shutil.rmtree(data_dir)
    except FileNotFoundError:
        _LOGGER.debug("%s disappeared before removal", data_dir)
        return False
    return True
