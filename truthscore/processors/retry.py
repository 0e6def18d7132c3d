from __future__ import annotations

import logging

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from truthscore.errors import ConfigurationError


def linear_retrying(
    max_retries: int, base_delay: float, logger: logging.Logger
) -> AsyncRetrying:
    """Retry policy shared by the LLM-backed stages.

    Up to *max_retries* attempts; the wait after attempt ``n`` is
    ``n * base_delay`` seconds. Configuration errors are never retried and
    the last error is re-raised once attempts run out.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, max_retries)),
        wait=wait_incrementing(start=base_delay, increment=base_delay),
        retry=retry_if_not_exception_type(ConfigurationError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
