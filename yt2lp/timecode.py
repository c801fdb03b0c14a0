"""
yt2lp.timecode - Timestamp token math.

Converts human-written timestamps (``1:02:03``, ``5:32``, ``PT1H2M3S``, ``90``)
to whole seconds and back.
"""

from __future__ import annotations

import re

from yt2lp.exceptions import TimecodeError

_CLOCK_RE = re.compile(r"^(\d+):(\d{1,2})(?::(\d{1,2}))?$")
_ISO_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?$")
_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")


def parse_timecode(token: str) -> int:
    """Convert a timestamp token to whole seconds.

    Accepts ``H:MM:SS``, ``M:SS``, ISO-8601 durations (``PT1H2M3S``, missing
    parts count as zero) and bare decimal seconds. Fractions are truncated.

    Args:
        token: Timestamp text

    Returns:
        Non-negative number of seconds

    Raises:
        TimecodeError: If the token matches none of the accepted shapes
    """
    if token is None:
        raise TimecodeError("Invalid time format: None")
    text = token.strip()

    match = _CLOCK_RE.match(text)
    if match:
        first, second, third = match.groups()
        if third is None:
            minutes, seconds = int(first), int(second)
            if seconds >= 60:
                raise TimecodeError(f"Invalid time format: {token!r}")
            return minutes * 60 + seconds
        hours, minutes, seconds = int(first), int(second), int(third)
        if minutes >= 60 or seconds >= 60:
            raise TimecodeError(f"Invalid time format: {token!r}")
        return hours * 3600 + minutes * 60 + seconds

    match = _ISO_RE.match(text.upper())
    if match and text.upper() != "PT":
        hours, minutes, seconds = match.groups()
        return int(hours or 0) * 3600 + int(minutes or 0) * 60 + int(float(seconds or 0))

    if _NUMBER_RE.match(text):
        return int(float(text))

    raise TimecodeError(f"Invalid time format: {token!r}")


def format_timecode(seconds: float) -> str:
    """Format seconds as H:MM:SS or M:SS.

    Args:
        seconds: Time in seconds (fractions are dropped)

    Returns:
        ``H:MM:SS`` when there is at least one hour, otherwise ``M:SS``

    Raises:
        TimecodeError: If seconds is negative
    """
    if seconds < 0:
        raise TimecodeError(f"Cannot format negative time: {seconds}")
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def looks_like_timecode(text: str) -> bool:
    """True if text starts with a ``digits:digits`` clock shape."""
    return re.match(r"^\d+:\d+", text.strip()) is not None
