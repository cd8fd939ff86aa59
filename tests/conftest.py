"""Pytest configuration and fixtures for keploy-workflow tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from keploy_workflow.settings import WorkflowConfig


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project with main.py, a venv interpreter and a keploy binary."""
    project = tmp_path / "flask-secret"
    (project / "venv" / "bin").mkdir(parents=True)
    (project / "venv" / "bin" / "python").write_text("#!/bin/sh\n")
    (project / "main.py").write_text("print('app')\n")
    return project


@pytest.fixture
def keploy_binary(tmp_path: Path) -> Path:
    """Create a stand-in keploy executable path."""
    binary = tmp_path / "bin" / "keploy"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\n")
    return binary


@pytest.fixture
def workflow_config(project_dir: Path, keploy_binary: Path) -> WorkflowConfig:
    """Create a config pointing at the temporary project, without delays."""
    return WorkflowConfig(
        keploy_binary=keploy_binary,
        project_dir=project_dir,
        use_sudo=False,
        warmup_delay=0,
        flush_grace=0,
        readiness_interval=0,
        request_delay=0,
    )


@pytest.fixture
def make_fixtures():
    """Write ``count`` recorded fixture files into the config's data dir."""

    def _make(config: WorkflowConfig, count: int, subdir: str = "test-set-0/tests") -> Path:
        tests_dir = config.data_dir / subdir
        tests_dir.mkdir(parents=True, exist_ok=True)
        for i in range(1, count + 1):
            (tests_dir / f"test-{i}.yaml").write_text(f"kind: Http\nname: test-{i}\n")
        return tests_dir

    return _make


@pytest.fixture
def make_secret_report():
    """Write a secret report with ``lines`` lines into the config's data dir."""

    def _make(config: WorkflowConfig, lines: int, subdir: str = "test-set-0") -> Path:
        report_dir = config.data_dir / subdir
        report_dir.mkdir(parents=True, exist_ok=True)
        report = report_dir / config.secret_report_name
        report.write_text("".join(f"secret_{i}: value\n" for i in range(lines)))
        return report

    return _make
