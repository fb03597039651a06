"""Bounded retry for calls to rate-limited collaborators."""

import logging
import time
from typing import Callable, TypeVar

from youagent.errors import RateLimited, UpstreamFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retries(
    fn: Callable[[], T],
    attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call fn, retrying on RateLimited (exponential backoff) and UpstreamFailure.

    Rate-limit retries wait base_delay * 2**attempt seconds; other upstream
    failures are retried immediately. After `attempts` tries the last error
    is re-raised. Any other exception propagates on the first occurrence.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")
    for attempt in range(attempts):
        try:
            return fn()
        except RateLimited as exc:
            if attempt == attempts - 1:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                "Rate limited (attempt %d/%d), retrying in %.1fs: %s",
                attempt + 1,
                attempts,
                delay,
                exc,
            )
            sleep(delay)
        except UpstreamFailure as exc:
            if attempt == attempts - 1:
                raise
            logger.warning(
                "Upstream failure (attempt %d/%d), retrying: %s",
                attempt + 1,
                attempts,
                exc,
            )
    raise AssertionError("unreachable")
