"""Keploy recording with generated traffic.

Exports:
    - probe_endpoint: Single GET request, True if the server answered
    - wait_for_app: Bounded readiness poll
    - generate_traffic: Sequential API calls with tallies
    - RecordProcess: Background ``keploy record`` handle
    - RecordOutcome: How a recording ended
    - CaptureWorkflowResult: Result dataclass from workflow
    - run_capture_workflow: Run the complete capture workflow
"""

from __future__ import annotations

from keploy_workflow.capture.connectivity import probe_endpoint, wait_for_app
from keploy_workflow.capture.recorder import (
    TIMEOUT_EXIT_CODE,
    RecordOutcome,
    RecordProcess,
    build_record_command,
    classify_exit_code,
    format_command,
)
from keploy_workflow.capture.traffic import TrafficResult, generate_traffic
from keploy_workflow.capture.workflow import (
    CaptureWorkflowResult,
    ReadinessResult,
    RecordResult,
    check_readiness_phase,
    run_capture_workflow,
    run_traffic_phase,
    verify_fixtures_phase,
    wait_record_phase,
)

__all__ = [
    # Connectivity
    "probe_endpoint",
    "wait_for_app",
    # Traffic
    "TrafficResult",
    "generate_traffic",
    # Record process
    "TIMEOUT_EXIT_CODE",
    "RecordOutcome",
    "RecordProcess",
    "build_record_command",
    "classify_exit_code",
    "format_command",
    # Workflow orchestration
    "CaptureWorkflowResult",
    "ReadinessResult",
    "RecordResult",
    "check_readiness_phase",
    "run_traffic_phase",
    "wait_record_phase",
    "verify_fixtures_phase",
    "run_capture_workflow",
]
