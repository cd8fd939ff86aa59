"""Application connectivity checking utilities.

This module provides the single-request probe shared by the readiness poller
and the traffic generator, and the bounded readiness poll itself.
"""

from __future__ import annotations

import http.client
import logging
import time
import urllib.error
import urllib.request
from collections.abc import Callable

_LOGGER = logging.getLogger(__name__)


def probe_endpoint(url: str, timeout: float = 5) -> tuple[bool, str | None]:
    """Send one GET request and report whether the server answered.

    Any HTTP response counts as an answer, including 4xx/5xx statuses.

    Args:
        url: Endpoint URL
        timeout: Request timeout in seconds

    Returns:
        Tuple of (answered, error_message)
        - answered: True if an HTTP response was received
        - error_message: None if answered, otherwise describes the problem
    """
    try:
        req = urllib.request.Request(url, method="GET")
        with urllib.request.urlopen(req, timeout=timeout) as response:
            response.read()
        return True, None
    except urllib.error.HTTPError as e:
        # HTTP error means the server is up
        e.close()
        return True, None
    except urllib.error.URLError as e:
        return False, str(e.reason)
    except (http.client.HTTPException, OSError, ValueError) as e:
        # Malformed replies count as a failed attempt
        return False, str(e) or type(e).__name__


def wait_for_app(
    url: str,
    max_attempts: int = 30,
    interval: float = 2,
    timeout: float = 2,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[bool, int, str | None]:
    """Poll an endpoint until the application answers.

    Fixed interval between attempts, no backoff.

    Args:
        url: Endpoint URL
        max_attempts: Maximum number of probes
        interval: Seconds to sleep after a failed probe
        timeout: Timeout of each probe in seconds
        sleep: Sleep function (injectable for tests)

    Returns:
        Tuple of (ready, attempts_made, last_error)
    """
    _LOGGER.info("Waiting for application to be ready at %s...", url)

    last_error: str | None = None
    for attempt in range(1, max_attempts + 1):
        answered, error = probe_endpoint(url, timeout=timeout)
        if answered:
            _LOGGER.info("Application is ready after %d attempt(s)", attempt)
            return True, attempt, None
        last_error = error
        _LOGGER.info("Attempt %d/%d: application not ready yet, waiting...", attempt, max_attempts)
        sleep(interval)

    _LOGGER.error("Application failed to start within %d attempts", max_attempts)
    return False, max_attempts, last_error
