"""
yt2lp.parsing - Timestamp extraction from free text.

Video descriptions list tracks in inconsistent ways ("Intro - 0:00",
"0:00 Intro", "0:00-Intro"). Each shape is a TimestampPattern; patterns are
tried in priority order and the first one that matches anything wins, so the
same line is never counted twice under two shapes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from yt2lp.exceptions import InputError, TimecodeError
from yt2lp.logging import get_logger
from yt2lp.timecode import looks_like_timecode, parse_timecode

logger = get_logger("parsing")

INVALID_POLICIES = ("skip", "abort")

_TIME = r"\d+:\d+(?::\d+)?"

# Separators left over around a title once the timecode is cut out
_TITLE_EDGE_CHARS = " \t-–—:|,;"


@dataclass(frozen=True)
class TimestampEntry:
    """A titled start time recovered from text."""

    title: str
    start: int
    token: str


@dataclass(frozen=True)
class TimestampPattern:
    """One textual shape of a timed entry.

    regex takes the title to the end of the line. inline, when set, splits a
    title at the next timecode; it is only used when regex finds a single
    entry, i.e. a whole tracklist written on one line.
    """

    name: str
    regex: re.Pattern[str]
    inline: re.Pattern[str] | None = None

    def find(self, text: str) -> list[tuple[str, str]]:
        """Return every (first group, second group) pair in text."""
        matches = [(m.group(1), m.group(2)) for m in self.regex.finditer(text)]
        if self.inline is not None and len(matches) == 1:
            split = [(m.group(1), m.group(2)) for m in self.inline.finditer(text)]
            if len(split) > 1:
                return split
        return matches


PATTERNS: tuple[TimestampPattern, ...] = (
    TimestampPattern(
        "title-dash-time",
        re.compile(rf"([^\n-]+)\s*-\s*({_TIME})"),
    ),
    TimestampPattern(
        "time-space-title",
        re.compile(rf"({_TIME})\s+([^\n]+)"),
        inline=re.compile(
            rf"({_TIME})\s+([^\n]+?)(?=[ \t,;]+{_TIME}\s|[ \t]*$)",
            re.MULTILINE,
        ),
    ),
    TimestampPattern(
        "time-dash-title",
        re.compile(rf"({_TIME})\s*-\s*([^\n]+)"),
        inline=re.compile(
            rf"({_TIME})\s*-\s*([^\n]+?)(?=[ \t,;]+{_TIME}\s*-|[ \t]*$)",
            re.MULTILINE,
        ),
    ),
)


def find_first_productive(
    text: str,
    patterns: tuple[TimestampPattern, ...] = PATTERNS,
) -> tuple[TimestampPattern | None, list[tuple[str, str]]]:
    """Return the first pattern with at least one match, and its matches."""
    for pattern in patterns:
        matches = pattern.find(text)
        if matches:
            return pattern, matches
    return None, []


def split_match(first: str, second: str) -> tuple[str, str]:
    """Decide which group is the timecode; return (title, token)."""
    if looks_like_timecode(first):
        return second, first.strip()
    return first, second.strip()


def normalize_title(title: str) -> str:
    """Trim whitespace and stray separators around a title."""
    return title.strip().strip(_TITLE_EDGE_CHARS).strip()


def parse_timestamps(text: str | None, on_invalid: str = "skip") -> list[TimestampEntry]:
    """Extract timed entries from free text.

    Args:
        text: Description or user-supplied timestamp text
        on_invalid: What to do with an entry whose timecode does not parse:
            "skip" drops that entry, "abort" fails the whole text

    Returns:
        Entries sorted by start time (empty if nothing was found)

    Raises:
        TimecodeError: If on_invalid is "abort" and a timecode is unparsable
        ValueError: If on_invalid is not a known policy
    """
    if on_invalid not in INVALID_POLICIES:
        raise ValueError(f"on_invalid must be one of: {INVALID_POLICIES}")

    if not text or not text.strip():
        logger.debug("No timestamp text provided")
        return []

    pattern, matches = find_first_productive(text)
    if pattern is None:
        logger.debug("No timestamps found")
        return []

    entries: list[TimestampEntry] = []
    for first, second in matches:
        raw_title, token = split_match(first, second)
        title = normalize_title(raw_title)
        if not title:
            logger.debug("Skipping untitled timestamp %s", token)
            continue
        try:
            start = parse_timecode(token)
        except TimecodeError:
            if on_invalid == "abort":
                raise
            logger.warning("Skipping %r: invalid timecode %r", title, token)
            continue
        entries.append(TimestampEntry(title=title, start=start, token=token))

    logger.info("%d timestamps found using %s", len(entries), pattern.name)
    entries.sort(key=lambda entry: entry.start)
    return entries


def read_timestamp_source(value: str) -> str:
    """Resolve a --timestamps argument to text.

    Values ending in ``.txt`` are read as files; anything else is literal text.

    Raises:
        InputError: If a .txt file cannot be read
    """
    if value.strip().lower().endswith(".txt"):
        path = Path(value).expanduser()
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise InputError(f"Could not read timestamps from {path}: {e}") from e
    return value
