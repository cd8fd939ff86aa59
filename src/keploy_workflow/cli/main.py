"""Main CLI entry point for keploy-workflow.

A single command runs the whole workflow:

    keploy-workflow [-t 60s] [-c 100] [--config settings.json]

Usage errors (unknown options, bad values) exit with status 1.
"""

from __future__ import annotations

import click
import typer

from keploy_workflow.cli import output
from keploy_workflow.cli.workflow import workflow

PROG_NAME = "keploy-workflow"

app = typer.Typer(
    name=PROG_NAME,
    help="Record, repair and sanitize Keploy test fixtures.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

app.command()(workflow)


def run(args: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        0 on success, 1 on any failure including usage errors
    """
    command = typer.main.get_command(app)
    try:
        rv = command.main(args=args, prog_name=PROG_NAME, standalone_mode=False)
    except click.UsageError as e:
        output.error(e.format_message())
        if e.ctx is not None:
            typer.echo(e.ctx.get_usage(), err=True)
            typer.echo(f"Try '{PROG_NAME} --help' for help.", err=True)
        return 1
    except click.Abort:
        output.error("Aborted")
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(run())
