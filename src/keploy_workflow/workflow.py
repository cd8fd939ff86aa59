"""Record/sanitize pipeline.

Runs the workflow steps strictly in order and stops at the first fatal
error:

    init -> prereq_ok -> cleaned -> capturing -> captured
         -> workaround_applied -> sanitized -> reported

Any ``WorkflowError`` moves the state to ``aborted`` and is re-raised.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from keploy_workflow.capture import CaptureWorkflowResult, run_capture_workflow
from keploy_workflow.exceptions import WorkflowError
from keploy_workflow.prereqs import check_prerequisites
from keploy_workflow.sanitization import (
    CorruptionResult,
    SanitizeResult,
    fix_config_corruption,
    run_sanitize,
)
from keploy_workflow.settings import WorkflowConfig
from keploy_workflow.summary import WorkflowSummary, build_summary
from keploy_workflow.workspace import clean_workspace

_LOGGER = logging.getLogger(__name__)


@dataclass
class WorkflowState:
    """Progress of a workflow run.

    Attributes:
        state: Current state name
        history: States entered so far, in order
        cleaned: True if an old fixture directory was removed
        capture: Capture result (None if not reached)
        corruption: Corruption workaround result (None if not reached)
        sanitize: Sanitize result (None if not reached)
        summary: Final summary (None if not reached)
        error: The fatal error if the run aborted
    """

    state: str = "init"
    history: list[str] = field(default_factory=lambda: ["init"])
    cleaned: bool = False
    capture: CaptureWorkflowResult | None = None
    corruption: CorruptionResult | None = None
    sanitize: SanitizeResult | None = None
    summary: WorkflowSummary | None = None
    error: WorkflowError | None = None

    def advance(self, state: str) -> None:
        """Move to ``state`` and record it."""
        self.state = state
        self.history.append(state)

    @property
    def aborted(self) -> bool:
        """True if a fatal error stopped the run."""
        return self.state == "aborted"


StepCallback = Callable[[WorkflowState], None]


def _noop(state: WorkflowState) -> None:
    pass


def run_workflow(
    config: WorkflowConfig,
    state: WorkflowState | None = None,
    on_step: StepCallback = _noop,
    sleep: Callable[[float], None] = time.sleep,
    popen: Callable[..., Any] = subprocess.Popen,
    run: Callable[..., Any] = subprocess.run,
) -> WorkflowState:
    """Run every workflow step in order.

    Args:
        config: Workflow configuration
        state: Existing state to update, or None to create new
        on_step: Called after each state transition
        sleep: Sleep function (injectable for tests)
        popen: Process factory for ``keploy record`` (injectable for tests)
        run: Subprocess runner for ``keploy sanitize`` (injectable for tests)

    Returns:
        WorkflowState in state "reported"

    Raises:
        WorkflowError: On the first fatal step, after moving to "aborted"
    """
    if state is None:
        state = WorkflowState()

    try:
        check_prerequisites(config)
        state.advance("prereq_ok")
        on_step(state)

        state.cleaned = clean_workspace(config)
        state.advance("cleaned")
        on_step(state)

        state.advance("capturing")
        on_step(state)
        state.capture = run_capture_workflow(config, sleep=sleep, popen=popen)
        state.advance("captured")
        on_step(state)

        state.corruption = fix_config_corruption(config)
        state.advance("workaround_applied")
        on_step(state)

        state.sanitize = run_sanitize(config, run=run)
        state.advance("sanitized")
        on_step(state)
    except WorkflowError as e:
        _LOGGER.debug("Workflow aborted after %s: %s", state.state, e)
        state.error = e
        state.advance("aborted")
        on_step(state)
        raise

    state.summary = build_summary(config)
    state.advance("reported")
    on_step(state)
    return state
