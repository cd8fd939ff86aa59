"""Tests for CLI main module."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest


class TestCliImport:
    """Tests for CLI import availability."""

    def test_can_import_cli_with_typer(self) -> None:
        """Test CLI can be imported when typer is available."""
        pytest.importorskip("typer")
        from keploy_workflow.cli.main import app

        assert app is not None

    def test_version_option(self) -> None:
        """Test version option works."""
        pytest.importorskip("typer")
        from typer.testing import CliRunner

        from keploy_workflow.cli.main import app

        runner = CliRunner()
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "keploy-workflow" in result.stdout

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag: str) -> None:
        """Test both help flags print usage and exit 0."""
        from typer.testing import CliRunner

        from keploy_workflow.cli.main import app

        result = CliRunner().invoke(app, [flag])

        assert result.exit_code == 0
        assert "--timeout" in result.stdout
        assert "--calls" in result.stdout


class TestRun:
    """Tests for run(), the exit-status wrapper."""

    @pytest.mark.parametrize(
        "args",
        [
            ["--bogus"],
            ["-x"],
            ["--calls", "many"],
            ["--calls", "-3"],
            ["--timeout", "soon"],
            ["--timeout"],
        ],
    )
    @patch("keploy_workflow.cli.workflow.run_workflow")
    def test_usage_errors_exit_1(
        self,
        mock_run: MagicMock,
        args: list[str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test unknown flags and bad values print usage and exit 1."""
        from keploy_workflow.cli.main import run

        assert run(args) == 1

        captured = capsys.readouterr()
        assert "[ERROR]" in captured.err
        assert "Usage:" in captured.err
        mock_run.assert_not_called()

    def test_version_exit_0(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version returns 0 through run()."""
        from keploy_workflow.cli.main import run

        assert run(["--version"]) == 0
        assert "keploy-workflow" in capsys.readouterr().out

    @patch("keploy_workflow.cli.output.configure_logging")
    @patch("keploy_workflow.cli.workflow.run_workflow")
    def test_success_exit_0(self, mock_run: MagicMock, mock_logging: MagicMock) -> None:
        """Test a successful workflow returns 0."""
        from keploy_workflow.cli.main import run

        assert run([]) == 0
        mock_run.assert_called_once()
