"""Workflow command for keploy-workflow CLI - records and sanitizes fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from keploy_workflow.cli import output
from keploy_workflow.exceptions import SettingsError, WorkflowError
from keploy_workflow.settings import WorkflowConfig, parse_duration
from keploy_workflow.summary import SummaryLevel, WorkflowSummary
from keploy_workflow.workflow import WorkflowState, run_workflow


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from keploy_workflow import __version__

        typer.echo(f"keploy-workflow {__version__}")
        raise typer.Exit()


def _validate_duration(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        parse_duration(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    return value


def workflow(
    timeout: Annotated[
        str | None,
        typer.Option(
            "--timeout",
            "-t",
            help="Recording timeout, e.g. 60s, 2m (default: 60s)",
            callback=_validate_duration,
        ),
    ] = None,
    calls: Annotated[
        int | None,
        typer.Option("--calls", "-c", min=0, help="Target number of API calls (default: 100)"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-f", help="JSON settings file merged over the defaults"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Record Keploy test cases and sanitize them.

    Starts the application under ``keploy record``, generates API calls while
    it records, removes a corrupted keploy.yml, then runs ``keploy sanitize``.

    Args:
        timeout: Recording wall-clock limit (timeout(1) syntax)
        calls: Number of API calls to generate
        config_file: JSON settings file overriding paths and timings
        verbose: Show debug logging
        version: Show version and exit

    Example:
        keploy-workflow
        keploy-workflow -t 90s -c 150
        keploy-workflow --config my-paths.json
    """
    output.configure_logging(verbose)

    try:
        config = WorkflowConfig.from_settings(config_file, record_timeout=timeout, target_calls=calls)
    except SettingsError as e:
        output.error(str(e))
        raise typer.Exit(1) from None

    _display_header(config)

    state = WorkflowState()
    try:
        run_workflow(config, state=state, on_step=_display_step)
    except WorkflowError as e:
        output.error(str(e))
        raise typer.Exit(1) from None

    output.success("Keploy test automation workflow completed successfully!")
    if state.summary is not None:
        _display_summary(state.summary)
    output.success("All steps completed successfully!")


def _display_header(config: WorkflowConfig) -> None:
    """Display workflow header."""
    typer.echo("=" * 60)
    typer.echo("KEPLOY TEST AUTOMATION WORKFLOW")
    typer.echo("=" * 60)
    typer.echo()
    typer.echo(f"  Project:    {config.project_dir}")
    typer.echo(f"  Endpoint:   {config.api_endpoint}")
    typer.echo(f"  Target:     {config.target_calls} API calls within {config.record_timeout}")
    typer.echo()


def _display_step(state: WorkflowState) -> None:
    """Display the status line for a completed state transition.

    Details and warnings come from the library log; only step milestones
    are printed here.
    """
    if state.state == "prereq_ok":
        output.success("Prerequisites check passed")
    elif state.state == "cleaned" and state.cleaned:
        output.success("Old test data and secret files cleaned up")
    elif state.state == "capturing":
        output.info("Recording API traffic with keploy record...")
    elif state.state == "captured" and state.capture is not None:
        if not state.capture.record.below_target:
            output.success(f"Generated {state.capture.fixture_count} test files")
    elif state.state == "workaround_applied" and state.corruption is not None:
        output.success("Recording workaround applied")
    elif state.state == "sanitized" and state.sanitize is not None:
        output.success(f"Keploy sanitization completed successfully in {state.sanitize.duration:.0f} seconds")


def _display_summary(summary: WorkflowSummary) -> None:
    """Display the final fixture and secret counts."""
    typer.echo()
    typer.echo("=" * 60)
    typer.echo("WORKFLOW SUMMARY")
    typer.echo("=" * 60)
    typer.echo()
    typer.echo(f"  Test files generated:  {summary.fixture_count}")
    typer.echo(f"  Secret files created:  {summary.secret_file_count}")
    typer.echo(f"  Secrets found:         {summary.secret_count}")
    typer.echo(f"  Keploy data directory: {summary.data_dir}")
    typer.echo()

    if summary.level is SummaryLevel.FULL:
        output.success(
            f"Successfully generated {summary.fixture_count} test cases (target: {summary.target_calls})"
        )
    elif summary.level is SummaryLevel.PARTIAL:
        output.warning(f"Generated {summary.fixture_count} test cases (target was {summary.target_calls})")
        typer.echo("  This is still sufficient to demonstrate the sanitization performance issue")
    else:
        output.warning(f"Only generated {summary.fixture_count} test cases (target was {summary.target_calls})")
        typer.echo("  You may want to increase the timeout or check the application")
    typer.echo()
