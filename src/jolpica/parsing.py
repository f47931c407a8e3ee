"""Typed parsing of the string fields the API returns.

Every parser returns ``None`` for a value it cannot read. Callers treat
``None`` as *unparseable* and decide explicitly what that means; nothing is
coerced to zero.
"""

from __future__ import annotations

import math
import re

_LAPPED_RE = re.compile(r"^\+\d+ Laps?$")


def parse_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text or not text.lstrip("-").isdigit():
        return None
    return int(text)


def parse_position(value: object) -> int | None:
    """Classified finishing/grid position, or None for DNF, 'R', '' and friends."""
    position = parse_int(value)
    if position is None or position < 1:
        return None
    return position


def parse_points(value: object) -> float | None:
    """Non-negative points value, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        points = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(points) or points < 0:
        return None
    return points


def parse_duration(value: object) -> float | None:
    """Pit-stop duration in seconds from ``"23.456"`` or ``"1:23.456"``.

    Usage:
        parse_duration("1:23.456")  # 83.456
        parse_duration("23.456")    # 23.456
        parse_duration("")          # None
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if ":" in text:
        parts = text.split(":")
        if len(parts) != 2:
            return None
        try:
            minutes = float(parts[0])
            seconds = float(parts[1])
        except ValueError:
            return None
        # Any non-negative pair is accepted, so "0:75.5" reads as 75.5.
        if not (math.isfinite(minutes) and math.isfinite(seconds)) or minutes < 0 or seconds < 0:
            return None
        # Round away float noise so "1:23.456" reads back as 83.456.
        return round(minutes * 60 + seconds, 6)
    try:
        seconds = float(text)
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def classify_status(status: str | None) -> str:
    """Reduce an upstream status descriptor to finished, lapped or retired."""
    if not status:
        return "retired"
    if status == "Finished":
        return "finished"
    if _LAPPED_RE.match(status.strip()):
        return "lapped"
    return "retired"
