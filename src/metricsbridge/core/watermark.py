"""Watermark tracking across writer invocations."""

import logging
import math
import threading

logger = logging.getLogger(__name__)


class Watermark:
    """End of the last successfully exported window, in epoch seconds.

    Unset until the first successful export. Updates are a max-merge under
    a lock, so concurrent invocations can never move it backwards.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: int | None = None

    def get(self) -> int | None:
        with self._lock:
            return self._value

    def advance(self, window_end: int) -> int:
        """Merge window_end into the watermark and return the new value."""
        with self._lock:
            if self._value is None or window_end > self._value:
                self._value = window_end
            return self._value


def compute_window(
    now: float, last_window_end: int | None, poll_interval_seconds: int
) -> tuple[int, int]:
    """Return the (start, end) window for an invocation at time now.

    The window ends at now floored to the second and starts at the previous
    window end. Without a previous end, or when it is not before the new
    end (same second, or the clock went backwards), the window falls back
    to one poll interval.
    """
    window_end = math.floor(now)
    if last_window_end is not None and last_window_end > window_end:
        logger.warning(
            "Clock is behind the last exported window end (%d > %d)",
            last_window_end,
            window_end,
        )
    if last_window_end is None or last_window_end >= window_end:
        return window_end - poll_interval_seconds, window_end
    return last_window_end, window_end
