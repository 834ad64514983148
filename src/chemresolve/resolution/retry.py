"""Retry with exponential backoff for remote source attempts.

Each source gets ``max_retries + 1`` attempts. Between attempts the caller
waits ``base_delay * 2**attempt_index`` seconds; there is no wait after the
last attempt. A source that answers "not found" (an empty set) is not retried.
"""

import logging
import threading
import time
from collections.abc import Callable

from chemresolve.config import RemoteSourceConfig
from chemresolve.errors import ResolutionCancelled, ResolverError, SourceExhaustedError
from chemresolve.identifiers import IdentifierSet

logger = logging.getLogger(__name__)

DEFAULT_BASE_DELAY = 1.0  # seconds before the first retry


def backoff_delay(attempt_index: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Delay before retrying after the given (0-based) failed attempt."""
    return base_delay * 2**attempt_index


def _wait(
    delay: float,
    sleep: Callable[[float], None] | None,
    cancel_event: threading.Event | None,
) -> bool:
    """Wait between attempts. Returns True if the caller cancelled."""
    if sleep is not None:
        sleep(delay)
        return cancel_event is not None and cancel_event.is_set()
    if cancel_event is not None:
        return cancel_event.wait(delay)
    time.sleep(delay)
    return False


def call_with_retries(
    config: RemoteSourceConfig,
    attempt: Callable[[], IdentifierSet],
    *,
    sleep: Callable[[float], None] | None = None,
    cancel_event: threading.Event | None = None,
    base_delay: float = DEFAULT_BASE_DELAY,
) -> IdentifierSet:
    """Run one source's lookup under its retry budget.

    Args:
        config: Source settings (name, max_retries)
        attempt: Performs a single lookup; raises ResolverError on failure
        sleep: Replacement for the backoff wait (tests pass a recorder)
        cancel_event: Set by the caller to abandon the lookup
        base_delay: Seconds to wait after the first failed attempt

    Returns:
        The first result from a successful attempt (empty means not found)

    Raises:
        SourceExhaustedError: If every attempt failed; chains the last error
        ResolutionCancelled: If the caller cancelled between attempts
    """
    last_error: ResolverError | None = None

    for attempt_index in range(config.max_attempts):
        if cancel_event is not None and cancel_event.is_set():
            raise ResolutionCancelled(config.name)
        try:
            return attempt()
        except ResolverError as e:
            last_error = e
            logger.warning(f"{config.name} attempt {attempt_index + 1}/{config.max_attempts} failed: {e}")

        # Don't wait after the last attempt
        if attempt_index < config.max_attempts - 1:
            delay = backoff_delay(attempt_index, base_delay)
            logger.debug(f"Retrying {config.name} in {delay:.1f}s")
            if _wait(delay, sleep, cancel_event):
                raise ResolutionCancelled(config.name)

    assert last_error is not None
    raise SourceExhaustedError(config.name, last_error, config.max_attempts) from last_error
