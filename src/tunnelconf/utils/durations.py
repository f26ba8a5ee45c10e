"""Go style duration strings such as ``24h``, ``1h30m`` or ``90s``."""

from __future__ import annotations

import datetime as _datetime
import re as _re

_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_COMPONENT = _re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> _datetime.timedelta:
    """
    Parse a duration such as ``24h`` or ``1h30m``.

    A bare ``0`` is accepted. Negative durations are not.

    Raises:
        ValueError: If the text is not a valid duration.
    """
    value = text.strip()
    if value == "0":
        return _datetime.timedelta()
    position = 0
    seconds = 0.0
    for match in _COMPONENT.finditer(value):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if not value or position != len(value):
        raise ValueError(f"invalid duration: {text!r}")
    return _datetime.timedelta(seconds=seconds)


def format_duration(duration: _datetime.timedelta) -> str:
    """Format a duration the way ``parse_duration`` reads it, e.g. ``24h0m0s``."""
    total = duration.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    seconds_text = f"{seconds:g}"
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{seconds_text}s"
    if minutes:
        return f"{sign}{int(minutes)}m{seconds_text}s"
    return f"{sign}{seconds_text}s"
