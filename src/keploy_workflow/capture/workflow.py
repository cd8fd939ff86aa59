"""Capture workflow orchestration.

This module runs a Keploy recording session: it starts ``keploy record`` in
the background, waits for the application to answer, generates traffic
while the recording runs, then waits for the recorder and checks that
fixtures were written.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from keploy_workflow.artifacts import count_fixture_files
from keploy_workflow.capture.connectivity import probe_endpoint, wait_for_app
from keploy_workflow.capture.recorder import RecordOutcome, RecordProcess, build_record_command
from keploy_workflow.capture.traffic import TrafficResult, generate_traffic
from keploy_workflow.exceptions import DataIntegrityError, ReadinessError, RecordError
from keploy_workflow.settings import WorkflowConfig
from keploy_workflow.summary import SUFFICIENT_FIXTURES

_LOGGER = logging.getLogger(__name__)

# =============================================================================
# Phase-specific result types
# =============================================================================


@dataclass
class ReadinessResult:
    """Result of the readiness poll.

    Attributes:
        ready: True if the application answered
        attempts: Number of probes sent
        error: Last probe error if never ready
    """

    ready: bool = False
    attempts: int = 0
    error: str | None = None


@dataclass
class RecordResult:
    """Result of waiting for the record process.

    Attributes:
        outcome: How the recording ended
        returncode: Exit status, None if the wait bound was reached
        fixture_count: Fixture files found after recording
        target_calls: Target number of API calls
        below_target: True if fewer than SUFFICIENT_FIXTURES were recorded
    """

    outcome: RecordOutcome | None = None
    returncode: int | None = None
    fixture_count: int = 0
    target_calls: int = 0
    below_target: bool = False


# =============================================================================
# Workflow context - composes phase results
# =============================================================================


@dataclass
class CaptureWorkflowResult:
    """Result of a capture workflow execution.

    Composes results from each phase. Check the phase field to determine
    how far the workflow progressed.

    Attributes:
        phase: Current phase of the capture
        readiness: Result of the readiness poll (None if not reached)
        traffic: Result of traffic generation (None if not reached)
        record: Result of the record wait and fixture check
    """

    phase: str = "init"
    readiness: ReadinessResult | None = None
    traffic: TrafficResult | None = None
    record: RecordResult = field(default_factory=RecordResult)

    @property
    def ready(self) -> bool:
        """True if the application answered the readiness poll."""
        return self.readiness.ready if self.readiness else False

    @property
    def outcome(self) -> RecordOutcome | None:
        """How the recording ended."""
        return self.record.outcome

    @property
    def fixture_count(self) -> int:
        """Fixture files found after recording."""
        return self.record.fixture_count

    @property
    def successful_calls(self) -> int:
        """API calls that received a response."""
        return self.traffic.successful if self.traffic else 0

    @property
    def failed_calls(self) -> int:
        """API calls that did not receive a response."""
        return self.traffic.failed if self.traffic else 0


# =============================================================================
# Phase functions
# =============================================================================


def check_readiness_phase(
    config: WorkflowConfig,
    result: CaptureWorkflowResult | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> CaptureWorkflowResult:
    """Poll the application endpoint until it answers.

    Args:
        config: Workflow configuration
        result: Existing result to update, or None to create new
        sleep: Sleep function (injectable for tests)

    Returns:
        CaptureWorkflowResult with readiness status
    """
    if result is None:
        result = CaptureWorkflowResult()

    ready, attempts, error = wait_for_app(
        config.api_endpoint,
        max_attempts=config.readiness_attempts,
        interval=config.readiness_interval,
        timeout=config.readiness_timeout,
        sleep=sleep,
    )
    result.readiness = ReadinessResult(ready=ready, attempts=attempts, error=error)
    result.phase = "ready" if ready else "ready_failed"
    return result


def run_traffic_phase(
    config: WorkflowConfig,
    result: CaptureWorkflowResult | None = None,
    sleep: Callable[[float], None] = time.sleep,
    probe: Callable[..., tuple[bool, str | None]] = probe_endpoint,
) -> CaptureWorkflowResult:
    """Generate the configured number of API calls.

    Args:
        config: Workflow configuration
        result: Existing result to update, or None to create new
        sleep: Sleep function (injectable for tests)
        probe: Single-request function (injectable for tests)

    Returns:
        CaptureWorkflowResult with traffic tallies
    """
    if result is None:
        result = CaptureWorkflowResult()

    result.traffic = generate_traffic(
        config.api_endpoint,
        calls=config.target_calls,
        delay=config.request_delay,
        timeout=config.request_timeout,
        failure_log_limit=config.failure_log_limit,
        progress_interval=config.progress_interval,
        sleep=sleep,
        probe=probe,
    )
    result.phase = "traffic"
    return result


def wait_record_phase(
    config: WorkflowConfig,
    process: RecordProcess,
    result: CaptureWorkflowResult | None = None,
) -> CaptureWorkflowResult:
    """Wait for the record process and classify its exit.

    Args:
        config: Workflow configuration
        process: Started record process
        result: Existing result to update, or None to create new

    Returns:
        CaptureWorkflowResult with the record outcome

    Raises:
        RecordError: If the record process failed
    """
    if result is None:
        result = CaptureWorkflowResult()

    outcome, returncode = process.wait(timeout=config.record_timeout_seconds + config.record_wait_margin)
    result.record.outcome = outcome
    result.record.returncode = returncode

    if outcome is RecordOutcome.FAILED:
        result.phase = "failed"
        raise RecordError(f"Keploy recording failed with exit code: {returncode}", returncode=returncode)

    if outcome is RecordOutcome.TIMED_OUT:
        _LOGGER.info("Keploy recording completed (timed out as expected)")
    else:
        _LOGGER.info("Keploy recording completed successfully")
    return result


def verify_fixtures_phase(
    config: WorkflowConfig,
    result: CaptureWorkflowResult | None = None,
) -> CaptureWorkflowResult:
    """Check that recording produced fixture files.

    Args:
        config: Workflow configuration
        result: Existing result to update, or None to create new

    Returns:
        CaptureWorkflowResult with the fixture count

    Raises:
        RecordError: If the fixture directory was not created
        DataIntegrityError: If no fixture files were recorded
    """
    if result is None:
        result = CaptureWorkflowResult()

    if not config.data_dir.is_dir():
        result.phase = "failed"
        raise RecordError(f"Keploy data directory was not created during recording: {config.data_dir}")

    count = count_fixture_files(config.data_dir, config.fixture_pattern)
    result.record.fixture_count = count
    result.record.target_calls = config.target_calls
    if count == 0:
        result.phase = "failed"
        raise DataIntegrityError("No test files were generated during recording", step="record")

    if count < SUFFICIENT_FIXTURES:
        result.record.below_target = True
        _LOGGER.warning(
            "Only %d test files generated (expected closer to %d)",
            count,
            config.target_calls,
        )

    result.phase = "captured"
    return result


def run_capture_workflow(
    config: WorkflowConfig,
    sleep: Callable[[float], None] = time.sleep,
    popen: Callable[..., Any] = subprocess.Popen,
    probe: Callable[..., tuple[bool, str | None]] = probe_endpoint,
) -> CaptureWorkflowResult:
    """Run the complete capture workflow.

    This function orchestrates all phases of the capture:
    1. Start ``keploy record`` in the background
    2. Wait for the application to answer
    3. Generate traffic while recording
    4. Wait for the recorder to exit
    5. Check that fixtures were written

    If the application never answers, or any error or interrupt occurs
    before the recorder is waited on, the record process is killed.

    Args:
        config: Workflow configuration
        sleep: Sleep function (injectable for tests)
        popen: Process factory (injectable for tests)
        probe: Single-request function for traffic (injectable for tests)

    Returns:
        CaptureWorkflowResult with phase "captured"

    Raises:
        ReadinessError: If the application never answered
        RecordError: If recording failed or wrote no fixture directory
        DataIntegrityError: If no fixture files were recorded
    """
    result = CaptureWorkflowResult(phase="capturing")

    process = RecordProcess(build_record_command(config), config.project_dir, popen=popen)
    process.start()

    try:
        # Give Keploy time to start the application
        sleep(config.warmup_delay)

        result = check_readiness_phase(config, result, sleep=sleep)
        if not result.ready:
            raise ReadinessError(
                f"Failed to connect to application at {config.api_endpoint}: {result.readiness.error}"
                if result.readiness and result.readiness.error
                else f"Failed to connect to application at {config.api_endpoint}"
            )

        result = run_traffic_phase(config, result, sleep=sleep, probe=probe)

        _LOGGER.info("Allowing Keploy to finish recording...")
        sleep(config.flush_grace)
    except BaseException:
        # Includes KeyboardInterrupt so the recorder never outlives the run
        process.terminate()
        raise

    result = wait_record_phase(config, process, result)
    return verify_fixtures_phase(config, result)
