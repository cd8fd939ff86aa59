"""Workflow settings and configuration.

This module provides:
- Loading of the built-in ``workflow.json`` settings
- Merging of a user-supplied JSON settings file over the defaults
- The read-only ``WorkflowConfig`` passed to every workflow step
"""

from __future__ import annotations

from keploy_workflow.settings.config import WorkflowConfig, parse_duration
from keploy_workflow.settings.loader import (
    load_json_file,
    load_workflow_settings,
)

__all__ = [
    # Settings loading
    "load_workflow_settings",
    "load_json_file",
    # Configuration
    "WorkflowConfig",
    "parse_duration",
]
