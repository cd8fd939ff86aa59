"""Read-only workflow configuration.

A ``WorkflowConfig`` is built once at startup from the merged settings and
the command-line overrides, then passed to every workflow step.
"""

from __future__ import annotations

import dataclasses
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from keploy_workflow.exceptions import SettingsError
from keploy_workflow.settings.loader import load_workflow_settings

# Same syntax as coreutils timeout(1): a number with an optional unit suffix
_DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)([smhd]?)$")

_DURATION_UNITS: dict[str, float] = {
    "": 1.0,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}


def parse_duration(value: str) -> float:
    """Convert a ``timeout``-style duration to seconds.

    Handles:
    - Bare number: "60" -> 60.0
    - Unit suffix: "60s" -> 60.0, "2m" -> 120.0, "1h" -> 3600.0
    - Fractions: "1.5m" -> 90.0

    Args:
        value: Duration string

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the string is not a valid duration
    """
    match = _DURATION_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. 60s, 2m, 90)")
    number, unit = match.groups()
    return float(number) * _DURATION_UNITS[unit]


@dataclass(frozen=True)
class WorkflowConfig:
    """Configuration shared by all workflow steps.

    Attributes:
        keploy_binary: Path to the Keploy executable
        project_dir: Root of the application project
        entry_point: Application entry-point file, relative to project_dir
        python_executable: Interpreter used to start the app (relative paths
            resolve against project_dir)
        api_endpoint: URL polled for readiness and hit for traffic
        data_dir_name: Fixture directory name inside project_dir
        config_file_name: Keploy metadata file name inside the fixture directory
        fixture_pattern: Glob matching recorded fixture files
        secret_report_name: File name of the secret reports written by sanitize
        record_timeout: Recording wall-clock limit in ``timeout`` syntax
        target_calls: Number of API calls to generate
        metadata: Tags attached to the recording session
        use_sudo: Run ``keploy record`` through sudo
        warmup_delay: Seconds to wait before polling the app
        flush_grace: Seconds to let Keploy flush after traffic
        record_wait_margin: Extra seconds to wait for the record process
            beyond record_timeout before killing it
        readiness_attempts: Maximum readiness probes
        readiness_interval: Seconds between readiness probes
        readiness_timeout: Timeout of one readiness probe
        request_timeout: Timeout of one traffic request
        request_delay: Pause after each traffic request
        failure_log_limit: Number of failed requests to warn about
        progress_interval: Log progress every this many successes
    """

    keploy_binary: Path
    project_dir: Path
    entry_point: str = "main.py"
    python_executable: Path = Path("venv/bin/python")
    api_endpoint: str = "http://localhost:8000/secret1"
    data_dir_name: str = "keploy"
    config_file_name: str = "keploy.yml"
    fixture_pattern: str = "test-*.yaml"
    secret_report_name: str = "secret.yaml"
    record_timeout: str = "60s"
    target_calls: int = 100
    metadata: dict[str, str] = field(default_factory=lambda: {"env": "test", "app": "flask-secret"})
    use_sudo: bool = True
    warmup_delay: float = 5.0
    flush_grace: float = 5.0
    record_wait_margin: float = 30.0
    readiness_attempts: int = 30
    readiness_interval: float = 2.0
    readiness_timeout: float = 2.0
    request_timeout: float = 5.0
    request_delay: float = 0.2
    failure_log_limit: int = 5
    progress_interval: int = 10

    def __post_init__(self) -> None:
        if self.target_calls < 0:
            raise SettingsError(f"target_calls must be >= 0, got {self.target_calls}")
        if self.readiness_attempts < 1:
            raise SettingsError(f"readiness_attempts must be >= 1, got {self.readiness_attempts}")
        try:
            parse_duration(self.record_timeout)
        except ValueError as e:
            raise SettingsError(str(e)) from e

    @classmethod
    def from_settings(
        cls,
        custom_path: Path | str | None = None,
        **overrides: Any,
    ) -> WorkflowConfig:
        """Build a config from the merged settings files.

        Args:
            custom_path: Optional custom settings file merged over the defaults
            **overrides: Field values taking precedence over both (None ignored)

        Returns:
            WorkflowConfig

        Raises:
            SettingsError: If the settings cannot be loaded or converted
        """
        settings = load_workflow_settings(custom_path)
        settings.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls(
                keploy_binary=Path(settings["keploy_binary"]),
                project_dir=Path(settings["project_dir"]),
                entry_point=str(settings["entry_point"]),
                python_executable=Path(settings["python_executable"]),
                api_endpoint=str(settings["api_endpoint"]),
                data_dir_name=str(settings["data_dir_name"]),
                config_file_name=str(settings["config_file_name"]),
                fixture_pattern=str(settings["fixture_pattern"]),
                secret_report_name=str(settings["secret_report_name"]),
                record_timeout=str(settings["record_timeout"]),
                target_calls=int(settings["target_calls"]),
                metadata={str(k): str(v) for k, v in settings["metadata"].items()},
                use_sudo=bool(settings["use_sudo"]),
                warmup_delay=float(settings["warmup_delay"]),
                flush_grace=float(settings["flush_grace"]),
                record_wait_margin=float(settings["record_wait_margin"]),
                readiness_attempts=int(settings["readiness_attempts"]),
                readiness_interval=float(settings["readiness_interval"]),
                readiness_timeout=float(settings["readiness_timeout"]),
                request_timeout=float(settings["request_timeout"]),
                request_delay=float(settings["request_delay"]),
                failure_log_limit=int(settings["failure_log_limit"]),
                progress_interval=int(settings["progress_interval"]),
            )
        except KeyError as e:
            raise SettingsError(f"Missing setting: {e.args[0]}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise SettingsError(f"Invalid setting value: {e}") from e

    def with_overrides(self, **changes: Any) -> WorkflowConfig:
        """Return a copy with the given fields replaced (None values ignored)."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def data_dir(self) -> Path:
        """Fixture directory written by Keploy."""
        return self.project_dir / self.data_dir_name

    @property
    def config_file(self) -> Path:
        """Keploy metadata file inside the fixture directory."""
        return self.data_dir / self.config_file_name

    @property
    def entry_point_path(self) -> Path:
        """Absolute path of the application entry point."""
        return self.project_dir / self.entry_point

    @property
    def python_path(self) -> Path:
        """Interpreter used to start the application."""
        return self.project_dir / self.python_executable

    @property
    def app_command(self) -> str:
        """Shell command Keploy uses to start the application."""
        return f"{shlex.quote(str(self.python_path))} {shlex.quote(self.entry_point)}"

    @property
    def metadata_arg(self) -> str:
        """Recording metadata in ``k=v,k=v`` form."""
        return ",".join(f"{key}={value}" for key, value in self.metadata.items())

    @property
    def record_timeout_seconds(self) -> float:
        """Recording wall-clock limit in seconds."""
        return parse_duration(self.record_timeout)

    @property
    def required_paths(self) -> list[tuple[str, Path, str]]:
        """Paths checked before any destructive step.

        Returns:
            List of (description, path, kind) where kind is "file" or "dir"
        """
        return [
            ("Keploy binary", self.keploy_binary, "file"),
            ("Project directory", self.project_dir, "dir"),
            (f"{self.entry_point} entry point", self.entry_point_path, "file"),
            ("Python virtual environment", self.python_path, "file"),
        ]
