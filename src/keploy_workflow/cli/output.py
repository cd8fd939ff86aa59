"""Console output for keploy-workflow.

Log records go to stderr with a timestamp; status lines are colored the
same way for every step.
"""

from __future__ import annotations

import logging

import typer

LOG_FORMAT = "[%(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool = False) -> None:
    """Send library log records to stderr with timestamps.

    Args:
        verbose: Log DEBUG records too
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def info(message: str) -> None:
    typer.secho(message, fg=typer.colors.BLUE)


def success(message: str) -> None:
    typer.secho(f"[SUCCESS] {message}", fg=typer.colors.GREEN)


def warning(message: str) -> None:
    typer.secho(f"[WARNING] {message}", fg=typer.colors.YELLOW)


def error(message: str) -> None:
    typer.secho(f"[ERROR] {message}", fg=typer.colors.RED, err=True)
