"""Keploy record subprocess management.

This module builds the ``keploy record`` command line, runs it in the
background and classifies how it ended.
"""

from __future__ import annotations

import enum
import logging
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from keploy_workflow.exceptions import RecordError
from keploy_workflow.settings import WorkflowConfig

_LOGGER = logging.getLogger(__name__)

# Exit status of timeout(1) when the time limit was reached
TIMEOUT_EXIT_CODE = 124

# Seconds to wait for the process to go away after killing it
_KILL_WAIT = 5


class RecordOutcome(enum.Enum):
    """How a recording session ended."""

    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        """True for outcomes that count as a successful recording."""
        return self is not RecordOutcome.FAILED


def classify_exit_code(returncode: int) -> RecordOutcome:
    """Map the record process exit status to an outcome.

    Args:
        returncode: Exit status of the ``timeout ... keploy record`` process

    Returns:
        COMPLETED for 0, TIMED_OUT for 124, FAILED otherwise
    """
    if returncode == 0:
        return RecordOutcome.COMPLETED
    if returncode == TIMEOUT_EXIT_CODE:
        return RecordOutcome.TIMED_OUT
    return RecordOutcome.FAILED


def build_record_command(config: WorkflowConfig) -> list[str]:
    """Build the argv that records the application under a time limit.

    Args:
        config: Workflow configuration

    Returns:
        Argument list: ``[sudo] timeout <T> <keploy> record --metadata <m> -c <app>``
    """
    command = [
        "timeout",
        config.record_timeout,
        str(config.keploy_binary),
        "record",
        "--metadata",
        config.metadata_arg,
        "-c",
        config.app_command,
    ]
    if config.use_sudo:
        command.insert(0, "sudo")
    return command


def format_command(command: list[str]) -> str:
    """Render an argv as a copy-pasteable shell command."""
    return shlex.join(command)


class RecordProcess:
    """Handle on a background ``keploy record`` process.

    Args:
        command: Argument list to run
        cwd: Working directory (the project directory)
        popen: Process factory (injectable for tests)
    """

    def __init__(
        self,
        command: list[str],
        cwd: Path,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self.command = command
        self.cwd = cwd
        self._popen = popen
        self._process: Any = None

    @property
    def pid(self) -> int | None:
        """Process id, or None if not started."""
        return self._process.pid if self._process is not None else None

    @property
    def returncode(self) -> int | None:
        """Exit status once the process has exited."""
        return self._process.returncode if self._process is not None else None

    def start(self) -> None:
        """Spawn the process without waiting for it.

        Raises:
            RecordError: If the command cannot be started
        """
        _LOGGER.info("Command: %s", format_command(self.command))
        try:
            self._process = self._popen(self.command, cwd=str(self.cwd))
        except OSError as e:
            raise RecordError(f"Failed to start Keploy record: {e}") from e
        _LOGGER.debug("Keploy record started with pid %s", self.pid)

    def wait(self, timeout: float | None = None) -> tuple[RecordOutcome, int | None]:
        """Block until the process exits or ``timeout`` elapses.

        Reaching the bound is reported as TIMED_OUT after killing the process.

        Args:
            timeout: Seconds to wait, None for no limit

        Returns:
            Tuple of (outcome, returncode); returncode is None when the bound was reached
        """
        if self._process is None:
            raise RuntimeError("Record process was not started")
        try:
            returncode = self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            _LOGGER.warning("Keploy record still running after %ss, stopping it", timeout)
            self.terminate()
            return RecordOutcome.TIMED_OUT, None
        return classify_exit_code(returncode), returncode

    def terminate(self) -> None:
        """Kill the process. Failures are logged and ignored."""
        if self._process is None:
            return
        try:
            self._process.kill()
        except OSError as e:
            _LOGGER.debug("Could not kill Keploy record (pid %s): %s", self.pid, e)
            return
        try:
            self._process.wait(timeout=_KILL_WAIT)
        except subprocess.TimeoutExpired:
            _LOGGER.debug("Keploy record (pid %s) did not exit after kill", self.pid)
