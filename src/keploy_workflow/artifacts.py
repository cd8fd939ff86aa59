"""Discovery of the files Keploy writes into the fixture directory.

Fixture files are only globbed and counted, never parsed. Secret reports are
counted by line, which approximates the number of redacted values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

DEFAULT_FIXTURE_PATTERN = "test-*.yaml"
DEFAULT_SECRET_REPORT_NAME = "secret.yaml"


@dataclass
class SecretReport:
    """A secret report written by ``keploy sanitize``.

    Attributes:
        path: Location of the report
        line_count: Number of lines, an approximate count of sensitive values
    """

    path: Path
    line_count: int


def find_fixture_files(data_dir: Path, pattern: str = DEFAULT_FIXTURE_PATTERN) -> list[Path]:
    """Find recorded fixture files anywhere under the fixture directory.

    Args:
        data_dir: Fixture directory
        pattern: File name glob of fixture files

    Returns:
        Sorted list of fixture file paths (empty if data_dir is missing)
    """
    if not data_dir.is_dir():
        return []
    return sorted(p for p in data_dir.rglob(pattern) if p.is_file())


def count_fixture_files(data_dir: Path, pattern: str = DEFAULT_FIXTURE_PATTERN) -> int:
    """Count recorded fixture files under the fixture directory."""
    return len(find_fixture_files(data_dir, pattern))


def find_secret_reports(data_dir: Path, name: str = DEFAULT_SECRET_REPORT_NAME) -> list[Path]:
    """Find secret report files anywhere under the fixture directory.

    Args:
        data_dir: Fixture directory
        name: Exact file name of secret reports

    Returns:
        Sorted list of report paths (empty if data_dir is missing)
    """
    if not data_dir.is_dir():
        return []
    return sorted(p for p in data_dir.rglob(name) if p.is_file())


def count_lines(path: Path) -> int:
    """Count newline-terminated lines like ``wc -l``.

    Unreadable files count as 0 lines.
    """
    try:
        return path.read_bytes().count(b"\n")
    except OSError as e:
        _LOGGER.warning("Could not read %s: %s", path, e)
        return 0


def collect_secret_reports(data_dir: Path, name: str = DEFAULT_SECRET_REPORT_NAME) -> list[SecretReport]:
    """Find secret reports and count their lines."""
    return [SecretReport(path=p, line_count=count_lines(p)) for p in find_secret_reports(data_dir, name)]
