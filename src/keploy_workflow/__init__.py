"""Keploy record/sanitize workflow automation.

This library drives a Keploy recording session against a local application:
- Checking prerequisites and cleaning the previous fixture directory
- Recording HTTP traffic into ``test-*.yaml`` fixtures with ``keploy record``
- Removing a control-byte-corrupted ``keploy.yml`` written by Keploy
- Running ``keploy sanitize`` and reporting the secret files it produced

Example usage:
    from keploy_workflow import WorkflowConfig, run_workflow

    config = WorkflowConfig.from_settings()
    state = run_workflow(config)
    print(state.summary.fixture_count)
"""

from __future__ import annotations

__version__ = "0.2.0"

# Re-export public API for convenience
from keploy_workflow.exceptions import WorkflowError
from keploy_workflow.settings import WorkflowConfig, load_workflow_settings
from keploy_workflow.workflow import WorkflowState, run_workflow

__all__ = [
    "__version__",
    "WorkflowConfig",
    "WorkflowError",
    "WorkflowState",
    "load_workflow_settings",
    "run_workflow",
]
