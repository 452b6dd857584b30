"""HTTP GET for registry metadata lookups: timeout, retries with backoff."""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _trace(message: str, target: str, attempt: int, **fields: Any) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            message,
            extra=extra_context(
                component="http_client",
                action="GET",
                target=target,
                attempt=attempt,
                **fields
            )
        )


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """GET ``url``, retrying timeouts, connection errors and 5xx responses.

    Attempts are capped at ``Constants.HTTP_RETRY_MAX`` with a linear backoff.
    Any status below 500 is returned as is.

    Returns:
        Tuple of (status_code, headers_dict, body_text). A status code of 0
        means every attempt failed; the body then describes the last failure.
    """
    target = safe_url(url)
    failure = "no attempt made"

    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        if attempt > 1:
            time.sleep(Constants.HTTP_RETRY_BACKOFF_SEC * (attempt - 1))
        _trace("HTTP request", target, attempt, event="http_request")
        with Timer() as timer:
            try:
                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=headers,
                    **kwargs
                )
            except requests.Timeout:
                failure = "timeout"
                _trace("HTTP timeout", target, attempt, event="http_exception", outcome="timeout")
                continue
            except requests.RequestException as exc:
                failure = str(exc)
                _trace("HTTP request exception", target, attempt, event="http_exception",
                       outcome="request_exception")
                continue

        if response.status_code >= 500:
            failure = f"HTTP {response.status_code}"
            _trace("HTTP server error", target, attempt, event="http_response", outcome="retry",
                   status_code=response.status_code, duration_ms=timer.duration_ms())
            continue

        _trace("HTTP response", target, attempt, event="http_response", outcome="success",
               status_code=response.status_code, duration_ms=timer.duration_ms())
        return response.status_code, dict(response.headers), response.text

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {failure}"
