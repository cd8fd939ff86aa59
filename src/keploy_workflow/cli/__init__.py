"""CLI for keploy-workflow.

This module provides a Typer-based command that runs the complete
record/sanitize workflow.
"""

from __future__ import annotations
