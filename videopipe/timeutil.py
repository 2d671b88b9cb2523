"""Date and time helpers: formatted timestamps, HTTP-style dates and waiting."""

from __future__ import annotations

import re
import signal
import threading
import time

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Offset (seconds) added before formatting a GMT date string.
_GMT_SHIFT = 28800

_GMT_PATTERN = re.compile(
    r"\s*(\w{1,3}),\s*(\d{1,2})\s*(\w{1,3})\s*(\d{1,4})\s*(\d{1,2}):(\d{1,2}):(\d{1,2})"
)


def date_now() -> str:
    """Return the local date as ``YYYY-MM-DD``."""
    return time.strftime("%Y-%m-%d", time.localtime())


def time_now() -> str:
    """Return the local date and time as ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


def gmtime(t: float) -> str:
    """Format a Unix time (shifted by eight hours) as ``Sat, 22 Aug 2015 11:48:50 GMT``."""
    tm = time.gmtime(int(t) + _GMT_SHIFT)
    return (
        f"{_WEEKDAYS[tm.tm_wday]}, {tm.tm_mday:02d} {_MONTHS[tm.tm_mon - 1]} "
        f"{tm.tm_year} {tm.tm_hour:02d}:{tm.tm_min:02d}:{tm.tm_sec:02d} GMT"
    )


def gmtime_now() -> str:
    """Return :func:`gmtime` for the current time."""
    return gmtime(time.time())


def gmtime2ctime(gmt: str) -> int:
    """Parse a ``Sat, 22 Aug 2015 11:48:50 GMT`` string as local time and return Unix time.

    Raises ValueError when the text cannot be parsed or names an unknown month.
    """
    match = _GMT_PATTERN.match(gmt)
    if match is None:
        raise ValueError(f"invalid GMT time string: {gmt!r}")
    _week, mday, month, year, hour, minute, second = match.groups()
    if month not in _MONTHS:
        raise ValueError(f"unknown month name: {month!r}")
    fields = (int(year), _MONTHS.index(month) + 1, int(mday),
              int(hour), int(minute), int(second), 0, 0, -1)
    return int(time.mktime(fields))


def timestamp_now() -> int:
    """Return milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def timestamp_now_float() -> float:
    """Return milliseconds since the epoch with microsecond resolution."""
    return (time.time_ns() // 1_000) / 1000.0


def sleep(ms: int) -> None:
    """Sleep for ``ms`` milliseconds."""
    time.sleep(ms / 1000.0)


def while_loop() -> int:
    """Block until SIGINT arrives and return the signal number."""
    from . import logger  # imported here: the logger itself uses this module

    stop = threading.Event()
    received: list[int] = []

    def _on_signal(signum, _frame):
        logger.log(logger.LogLevel.INFO, "Capture interrupt signal.")
        received.append(signum)
        stop.set()

    previous = signal.signal(signal.SIGINT, _on_signal)
    try:
        while not stop.wait(0.05):
            pass
    finally:
        signal.signal(signal.SIGINT, previous)
    logger.log(logger.LogLevel.INFO, "Loop over.")
    return int(received[-1])