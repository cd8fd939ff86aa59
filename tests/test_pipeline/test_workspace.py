"""Tests for workspace cleanup."""

from __future__ import annotations

import logging

import pytest

from keploy_workflow.settings import WorkflowConfig
from keploy_workflow.workspace import clean_workspace


def test_removes_existing_directory(workflow_config: WorkflowConfig, make_fixtures) -> None:
    """Test the whole fixture directory is deleted."""
    make_fixtures(workflow_config, 3)

    assert clean_workspace(workflow_config) is True
    assert not workflow_config.data_dir.exists()


def test_missing_directory_is_noop(workflow_config: WorkflowConfig) -> None:
    """Test nothing happens when there is no fixture directory."""
    assert clean_workspace(workflow_config) is False
    assert workflow_config.project_dir.is_dir()


def test_idempotent(workflow_config: WorkflowConfig, make_fixtures) -> None:
    """Test cleaning twice leaves the directory absent without error."""
    make_fixtures(workflow_config, 2)

    clean_workspace(workflow_config)
    assert not workflow_config.data_dir.exists()

    assert clean_workspace(workflow_config) is False
    assert not workflow_config.data_dir.exists()


def test_logs_leftover_secret_reports(
    workflow_config: WorkflowConfig,
    make_fixtures,
    make_secret_report,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test leftover secret reports are mentioned and removed."""
    make_fixtures(workflow_config, 1)
    report = make_secret_report(workflow_config, 4)

    with caplog.at_level(logging.INFO, logger="keploy_workflow.workspace"):
        clean_workspace(workflow_config)

    assert "secret.yaml" in caplog.text
    assert not report.exists()


def test_keeps_project_files(workflow_config: WorkflowConfig, make_fixtures) -> None:
    """Test only the fixture directory is removed."""
    make_fixtures(workflow_config, 1)

    clean_workspace(workflow_config)

    assert workflow_config.entry_point_path.is_file()
    assert workflow_config.python_path.is_file()
