"""Entry point for python -m keploy_workflow."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the CLI application."""
    from keploy_workflow.cli.main import run

    sys.exit(run())


if __name__ == "__main__":
    main()
