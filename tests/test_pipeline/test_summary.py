"""Tests for the final summary."""

from __future__ import annotations

import pytest

from keploy_workflow.settings import WorkflowConfig
from keploy_workflow.summary import SummaryLevel, build_summary, classify_fixture_count

# fmt: off
CLASSIFY_CASES = [
    # (count, level,               desc)
    (120,     SummaryLevel.FULL,    "above 100"),
    (100,     SummaryLevel.FULL,    "exactly 100"),
    (99,      SummaryLevel.PARTIAL, "just below 100"),
    (50,      SummaryLevel.PARTIAL, "exactly 50"),
    (49,      SummaryLevel.LOW,     "below 50"),
    (10,      SummaryLevel.LOW,     "small run"),
    (0,       SummaryLevel.LOW,     "nothing"),
]
# fmt: on


@pytest.mark.parametrize(
    ("count", "level", "desc"),
    CLASSIFY_CASES,
    ids=[c[2] for c in CLASSIFY_CASES],
)
def test_classify_fixture_count(count: int, level: SummaryLevel, desc: str) -> None:
    """Test fixture counts are classified against the fixed 100/50 thresholds."""
    assert classify_fixture_count(count) is level, desc


def test_build_summary(workflow_config: WorkflowConfig, make_fixtures, make_secret_report) -> None:
    """Test the summary counts fixtures, reports and report lines."""
    make_fixtures(workflow_config, 120)
    make_secret_report(workflow_config, 8)

    summary = build_summary(workflow_config)

    assert summary.fixture_count == 120
    assert summary.secret_file_count == 1
    assert summary.secret_count == 8
    assert summary.level is SummaryLevel.FULL
    assert summary.data_dir == workflow_config.data_dir


def test_build_summary_without_directory(workflow_config: WorkflowConfig) -> None:
    """Test a missing data dir yields zero counts."""
    summary = build_summary(workflow_config)

    assert summary.fixture_count == 0
    assert summary.secret_file_count == 0
    assert summary.level is SummaryLevel.LOW


def test_small_target_met_is_still_low(workflow_config: WorkflowConfig, make_fixtures) -> None:
    """Test meeting a small --calls target does not count as a full run."""
    config = workflow_config.with_overrides(target_calls=10)
    make_fixtures(config, 10)

    summary = build_summary(config)

    assert summary.fixture_count == 10
    assert summary.target_calls == 10
    assert summary.level is SummaryLevel.LOW
