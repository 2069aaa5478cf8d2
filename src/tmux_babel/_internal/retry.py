"""Retry helpers for tmux-babel."""

from __future__ import annotations

import logging
import time
import typing as t

from tmux_babel.exc import WaitTimeout

logger = logging.getLogger(__name__)

if t.TYPE_CHECKING:
    from collections.abc import Callable


def retry_until(
    fun: Callable[[], bool],
    seconds: float | None = 8,
    *,
    interval: float = 0.05,
    backoff: float = 1.0,
    max_interval: float = 1.0,
    raises: bool | None = True,
) -> bool:
    """
    Retry a function until a condition meets or the specified time passes.

    Parameters
    ----------
    fun : callable
        A function that will be called repeatedly until it returns ``True``  or
        the specified time passes.
    seconds : float, optional
        Seconds to retry. ``None`` retries forever.
    interval : float
        Time in seconds to wait between calls.
    backoff : float
        Multiplier applied to *interval* after each failed call, ``1`` keeps a
        fixed interval.
    max_interval : float
        Upper bound for the interval when *backoff* grows it.
    raises : bool
        Whether or not to raise an exception on timeout. Defaults to ``True``.

    Examples
    --------
    >>> calls = iter([False, False, True])
    >>> retry_until(lambda: next(calls), 1, interval=0)
    True

    >>> retry_until(lambda: False, 0.01, interval=0, raises=False)
    False
    """
    ini = time.monotonic()
    wait = interval

    while not fun():
        if seconds is not None:
            end = time.monotonic()
            if end - ini >= seconds:
                if raises:
                    timeout_msg = f"Timed out after {seconds} seconds"
                    raise WaitTimeout(timeout_msg, seconds=seconds)
                return False
        time.sleep(wait)
        if backoff != 1:
            wait = min(wait * backoff, max_interval)
    return True
