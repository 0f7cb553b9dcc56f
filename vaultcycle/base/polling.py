"""
Polling with configurable exponential backoff.

:func:`poll_until` repeatedly evaluates a probe until it reports readiness
or a deadline passes; used instead of fixed sleeps while waiting
for the provider to converge.
"""

from __future__ import annotations

import time
import logging
from typing import Callable, TypeVar

from vaultcycle.base.exceptions import OperationTimeoutError

logger = logging.getLogger("vaultcycle")

T = TypeVar("T")


def poll_until(
    probe: Callable[[], T | None],
    *,
    timeout: float,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    description: str = "condition",
) -> T:
    """Call *probe* until it returns something other than ``None``.

    The first probe runs immediately. Between probes the delay starts at
    *initial_delay*, grows by *backoff_factor* and is capped at *max_delay*;
    the last sleep is shortened so the deadline is never overshot.

    Args:
        probe: Zero-argument callable returning ``None`` while not ready.
            Exceptions raised by the probe propagate unchanged.
        timeout: Seconds after which polling gives up.
        initial_delay: Delay before the second probe.
        max_delay: Cap on the delay between probes.
        backoff_factor: Multiplier applied to the delay after each probe.
        description: Used in log and error messages.

    Returns:
        The first non-``None`` value returned by *probe*.

    Raises:
        OperationTimeoutError: If *probe* is still not ready at the deadline.
    """
    deadline = time.monotonic() + timeout
    delay = initial_delay
    attempt = 0
    while True:
        attempt += 1
        value = probe()
        if value is not None:
            logger.debug("%s ready after %d probe(s)", description, attempt)
            return value
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise OperationTimeoutError(
                f"Timed out after {timeout:.1f}s waiting for {description} "
                f"({attempt} probe(s))"
            )
        logger.debug(
            "%s not ready (probe %d), next probe in %.1fs",
            description,
            attempt,
            min(delay, remaining),
        )
        time.sleep(min(delay, remaining))
        delay = min(delay * backoff_factor, max_delay)
