"""Tests for the keploy record process handle."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from keploy_workflow.capture.recorder import (
    TIMEOUT_EXIT_CODE,
    RecordOutcome,
    RecordProcess,
    build_record_command,
    classify_exit_code,
    format_command,
)
from keploy_workflow.exceptions import RecordError
from keploy_workflow.settings import WorkflowConfig

# fmt: off
EXIT_CODE_CASES = [
    # (returncode, outcome,                  desc)
    (0,            RecordOutcome.COMPLETED,  "clean exit"),
    (124,          RecordOutcome.TIMED_OUT,  "timeout reached"),
    (1,            RecordOutcome.FAILED,     "generic failure"),
    (125,          RecordOutcome.FAILED,     "timeout itself failed"),
    (137,          RecordOutcome.FAILED,     "killed"),
    (-9,           RecordOutcome.FAILED,     "signal"),
]
# fmt: on


@pytest.mark.parametrize(("returncode", "outcome", "desc"), EXIT_CODE_CASES, ids=[c[2] for c in EXIT_CODE_CASES])
def test_classify_exit_code(returncode: int, outcome: RecordOutcome, desc: str) -> None:
    """Test 0 and 124 are successes and everything else fails."""
    assert classify_exit_code(returncode) is outcome, desc
    assert outcome.ok is (returncode in (0, TIMEOUT_EXIT_CODE))


class TestBuildRecordCommand:
    """Tests for build_record_command function."""

    def test_with_sudo(self) -> None:
        """Test the default command runs through sudo and timeout."""
        config = WorkflowConfig(keploy_binary=Path("/opt/keploy"), project_dir=Path("/srv/app"))

        assert build_record_command(config) == [
            "sudo",
            "timeout",
            "60s",
            "/opt/keploy",
            "record",
            "--metadata",
            "env=test,app=flask-secret",
            "-c",
            "/srv/app/venv/bin/python main.py",
        ]

    def test_without_sudo(self) -> None:
        """Test sudo can be disabled."""
        config = WorkflowConfig(
            keploy_binary=Path("/opt/keploy"),
            project_dir=Path("/srv/app"),
            use_sudo=False,
            record_timeout="90s",
        )

        command = build_record_command(config)

        assert command[:3] == ["timeout", "90s", "/opt/keploy"]

    def test_format_command_quotes(self) -> None:
        """Test the logged command quotes the app command."""
        rendered = format_command(["keploy", "record", "-c", "python main.py"])

        assert rendered == "keploy record -c 'python main.py'"


class TestRecordProcess:
    """Tests for RecordProcess."""

    def _started(self, process_mock: MagicMock) -> tuple[RecordProcess, MagicMock]:
        popen = MagicMock(return_value=process_mock)
        handle = RecordProcess(["timeout", "60s", "keploy", "record"], Path("/srv/app"), popen=popen)
        handle.start()
        return handle, popen

    def test_start_spawns_in_project_dir(self) -> None:
        """Test the process starts in the project directory."""
        process = MagicMock(pid=99)
        handle, popen = self._started(process)

        popen.assert_called_once_with(["timeout", "60s", "keploy", "record"], cwd="/srv/app")
        assert handle.pid == 99

    def test_start_failure(self) -> None:
        """Test a missing executable raises RecordError."""
        popen = MagicMock(side_effect=FileNotFoundError("sudo"))
        handle = RecordProcess(["sudo"], Path("/srv/app"), popen=popen)

        with pytest.raises(RecordError, match="Failed to start"):
            handle.start()

    @pytest.mark.parametrize(
        ("returncode", "outcome"),
        [(0, RecordOutcome.COMPLETED), (124, RecordOutcome.TIMED_OUT), (2, RecordOutcome.FAILED)],
    )
    def test_wait_classifies(self, returncode: int, outcome: RecordOutcome) -> None:
        """Test the exit status is classified."""
        process = MagicMock()
        process.wait.return_value = returncode
        handle, _ = self._started(process)

        assert handle.wait(timeout=90) == (outcome, returncode)
        process.wait.assert_called_once_with(timeout=90)

    def test_wait_bound_reached(self) -> None:
        """Test reaching the wait bound kills the process and reports TIMED_OUT."""
        process = MagicMock()
        process.wait.side_effect = [subprocess.TimeoutExpired("keploy", 90), -9]
        handle, _ = self._started(process)

        outcome, returncode = handle.wait(timeout=90)

        assert outcome is RecordOutcome.TIMED_OUT
        assert returncode is None
        process.kill.assert_called_once()

    def test_wait_before_start(self) -> None:
        """Test waiting on an unstarted process is an error."""
        handle = RecordProcess(["keploy"], Path("/srv/app"), popen=MagicMock())

        with pytest.raises(RuntimeError):
            handle.wait()

    def test_terminate_swallows_kill_errors(self) -> None:
        """Test a kill refused by the OS is ignored."""
        process = MagicMock()
        process.kill.side_effect = PermissionError("not permitted")
        handle, _ = self._started(process)

        handle.terminate()

        process.wait.assert_not_called()

    def test_terminate_swallows_wait_timeout(self) -> None:
        """Test a process that ignores the kill does not block forever."""
        process = MagicMock()
        process.wait.side_effect = subprocess.TimeoutExpired("keploy", 5)
        handle, _ = self._started(process)

        handle.terminate()

        process.kill.assert_called_once()

    def test_terminate_unstarted_is_noop(self) -> None:
        """Test terminating before start does nothing."""
        popen = MagicMock()
        handle = RecordProcess(["keploy"], Path("/srv/app"), popen=popen)

        handle.terminate()

        popen.assert_not_called()
