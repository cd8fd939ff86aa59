"""Final fixture and secret report summary."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from keploy_workflow.artifacts import collect_secret_reports, count_fixture_files
from keploy_workflow.settings import WorkflowConfig

# Fixture counts for a full run and for one still good enough to sanitize
FULL_SUCCESS_FIXTURES = 100
SUFFICIENT_FIXTURES = 50


class SummaryLevel(enum.Enum):
    """How many fixtures a run recorded."""

    FULL = "full"
    PARTIAL = "partial"
    LOW = "low"


def classify_fixture_count(count: int) -> SummaryLevel:
    """Classify a recorded fixture count.

    The thresholds are fixed and do not follow ``--calls``.

    Args:
        count: Recorded fixture files

    Returns:
        FULL at FULL_SUCCESS_FIXTURES or more, PARTIAL at SUFFICIENT_FIXTURES
        or more, LOW otherwise
    """
    if count >= FULL_SUCCESS_FIXTURES:
        return SummaryLevel.FULL
    if count >= SUFFICIENT_FIXTURES:
        return SummaryLevel.PARTIAL
    return SummaryLevel.LOW


@dataclass
class WorkflowSummary:
    """Counts reported at the end of a run.

    Attributes:
        data_dir: Fixture directory
        target_calls: Target number of API calls
        fixture_count: Fixture files present
        secret_file_count: Secret report files present
        secret_count: Summed line count of the secret reports
        level: Classification of fixture_count
    """

    data_dir: Path
    target_calls: int
    fixture_count: int = 0
    secret_file_count: int = 0
    secret_count: int = 0
    level: SummaryLevel = SummaryLevel.LOW


def build_summary(config: WorkflowConfig) -> WorkflowSummary:
    """Re-count fixtures and secret reports for the final report."""
    fixture_count = count_fixture_files(config.data_dir, config.fixture_pattern)
    reports = collect_secret_reports(config.data_dir, config.secret_report_name)
    return WorkflowSummary(
        data_dir=config.data_dir,
        target_calls=config.target_calls,
        fixture_count=fixture_count,
        secret_file_count=len(reports),
        secret_count=sum(report.line_count for report in reports),
        level=classify_fixture_count(fixture_count),
    )
