"""Post-recording fixture clean-up.

This module provides:
- Removal of a control-byte-corrupted ``keploy.yml``
- Invocation of ``keploy sanitize`` and secret report verification
"""

from __future__ import annotations

from keploy_workflow.sanitization.corruption import (
    CONTROL_BYTES_PATTERN,
    CorruptionResult,
    fix_config_corruption,
    has_control_bytes,
    remove_if_corrupted,
)
from keploy_workflow.sanitization.sanitizer import (
    SanitizeResult,
    build_sanitize_command,
    run_sanitize,
)

__all__ = [
    # Corruption workaround
    "CONTROL_BYTES_PATTERN",
    "CorruptionResult",
    "fix_config_corruption",
    "has_control_bytes",
    "remove_if_corrupted",
    # Sanitize
    "SanitizeResult",
    "build_sanitize_command",
    "run_sanitize",
]
