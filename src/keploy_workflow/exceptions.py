"""Error types raised by workflow steps.

Every fatal condition of the workflow is a ``WorkflowError``. The CLI turns
any of them into an ``[ERROR]`` line on stderr and exit code 1.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base error for a fatal workflow condition.

    Attributes:
        step: Name of the workflow step that failed
    """

    step = "workflow"

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        if step is not None:
            self.step = step


class SettingsError(WorkflowError):
    """Raised when a settings file cannot be loaded or is invalid."""

    step = "settings"


class PrerequisiteError(WorkflowError):
    """Raised when a required path is missing."""

    step = "prerequisites"

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path


class ReadinessError(WorkflowError):
    """Raised when the application never answered the readiness probe."""

    step = "record"


class RecordError(WorkflowError):
    """Raised when ``keploy record`` fails or produces no fixture directory."""

    step = "record"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class DataIntegrityError(WorkflowError):
    """Raised when no fixture files are left to work with."""


class SanitizeError(WorkflowError):
    """Raised when ``keploy sanitize`` exits non-zero or cannot start."""

    step = "sanitize"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
