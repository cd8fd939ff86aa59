"""Keploy sanitize invocation and secret report verification."""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from keploy_workflow.artifacts import SecretReport, collect_secret_reports
from keploy_workflow.capture.recorder import format_command
from keploy_workflow.exceptions import SanitizeError
from keploy_workflow.settings import WorkflowConfig

_LOGGER = logging.getLogger(__name__)


@dataclass
class SanitizeResult:
    """Result of running ``keploy sanitize``.

    Attributes:
        returncode: Exit status of the sanitize process
        duration: Wall-clock seconds the command took
        reports: Secret reports found afterwards
    """

    returncode: int = 0
    duration: float = 0.0
    reports: list[SecretReport] = field(default_factory=list)

    @property
    def secret_count(self) -> int:
        """Approximate number of secrets (sum of report line counts)."""
        return sum(report.line_count for report in self.reports)


def build_sanitize_command(config: WorkflowConfig) -> list[str]:
    """Build the argv for ``keploy sanitize``."""
    return [str(config.keploy_binary), "sanitize"]


def run_sanitize(
    config: WorkflowConfig,
    run: Callable[..., Any] = subprocess.run,
    clock: Callable[[], float] = time.monotonic,
) -> SanitizeResult:
    """Run ``keploy sanitize`` in the project directory and check its reports.

    A missing secret report is only a warning: it may mean no secrets were
    found or that detection did not run, and the two cannot be told apart.

    Args:
        config: Workflow configuration
        run: Subprocess runner (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        SanitizeResult

    Raises:
        SanitizeError: If the command cannot start or exits non-zero
    """
    command = build_sanitize_command(config)
    _LOGGER.info("Command: %s", format_command(command))

    start = clock()
    try:
        completed = run(command, cwd=str(config.project_dir), check=False)
    except OSError as e:
        raise SanitizeError(f"Keploy sanitization could not start: {e}") from e
    duration = clock() - start

    if completed.returncode != 0:
        raise SanitizeError(
            f"Keploy sanitization failed with exit code: {completed.returncode}",
            returncode=completed.returncode,
        )

    result = SanitizeResult(returncode=completed.returncode, duration=duration)
    result.reports = collect_secret_reports(config.data_dir, config.secret_report_name)

    if not result.reports:
        _LOGGER.warning(
            "No %s files found - this may indicate no secrets were detected",
            config.secret_report_name,
        )
        return result

    _LOGGER.info("Sanitization created %d %s file(s)", len(result.reports), config.secret_report_name)
    for report in result.reports:
        _LOGGER.info("Secret file: %s contains %d sensitive patterns", report.path, report.line_count)
    return result
