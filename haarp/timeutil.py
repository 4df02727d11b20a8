"""Clock and date helpers."""

from __future__ import annotations

import re
import time

_HTTP_DATE = re.compile(r"\s*(.*?\d+:\d+:\d+)(?:\s+\S+)?\s*$")


def now() -> float:
    """Current time in seconds, with sub-second precision."""
    return time.time()


def tnow() -> int:
    """Current time in whole seconds."""
    return int(time.time())


def http_date_to_epoch(text: str) -> int:
    """Parse ``"Thu, 01 Jan 2009 00:00:00 GMT"`` as local time; the zone word is ignored."""
    found = _HTTP_DATE.match(text)
    if found is None:
        raise ValueError(f"not an HTTP date: {text!r}")
    parsed = time.strptime(found.group(1), "%a, %d %b %Y %H:%M:%S")
    return int(time.mktime(parsed))


def time_to_date_str(timestamp: float) -> str:
    """Format as local ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))


def date_str_to_time(text: str) -> int:
    """Parse local ``YYYY-MM-DD HH:MM:SS`` into epoch seconds."""
    return int(time.mktime(time.strptime(text, "%Y-%m-%d %H:%M:%S")))


def elapsed_ms(start: float, finish: float) -> float:
    """Milliseconds between two times given in seconds, at microsecond resolution."""
    return (round(finish * 1_000_000) - round(start * 1_000_000)) / 1000.0