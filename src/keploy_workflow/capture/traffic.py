"""Synthetic traffic generation against the recorded application."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from keploy_workflow.capture.connectivity import probe_endpoint

_LOGGER = logging.getLogger(__name__)


@dataclass
class TrafficResult:
    """Tally of generated API calls.

    Attributes:
        attempted: Number of requests issued
        successful: Requests that received an HTTP response
        failed: Requests that did not
    """

    attempted: int = 0
    successful: int = 0
    failed: int = 0


def generate_traffic(
    url: str,
    calls: int = 100,
    delay: float = 0.2,
    timeout: float = 5,
    failure_log_limit: int = 5,
    progress_interval: int = 10,
    sleep: Callable[[float], None] = time.sleep,
    probe: Callable[..., tuple[bool, str | None]] = probe_endpoint,
) -> TrafficResult:
    """Issue ``calls`` sequential GET requests.

    Failures are tallied and never stop the run. Only the first
    ``failure_log_limit`` failures are logged.

    Args:
        url: Endpoint URL
        calls: Number of requests to issue
        delay: Seconds to pause after each request
        timeout: Timeout of each request in seconds
        failure_log_limit: Number of failures to warn about
        progress_interval: Log progress every this many successes
        sleep: Sleep function (injectable for tests)
        probe: Single-request function (injectable for tests)

    Returns:
        TrafficResult with successful + failed == calls
    """
    _LOGGER.info("Generating %d API calls to: %s", calls, url)

    result = TrafficResult()
    for i in range(1, calls + 1):
        answered, error = probe(url, timeout=timeout)
        result.attempted += 1
        if answered:
            result.successful += 1
            if progress_interval > 0 and result.successful % progress_interval == 0:
                _LOGGER.info("Successfully completed %d API calls", result.successful)
        else:
            result.failed += 1
            if result.failed <= failure_log_limit:
                _LOGGER.warning("API call %d failed: %s", i, error)

        sleep(delay)

    _LOGGER.info(
        "Traffic generation completed: %d successful, %d failed",
        result.successful,
        result.failed,
    )
    return result
