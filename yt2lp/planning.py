"""
yt2lp.planning - Segment boundaries from timestamp entries.

Each entry ends where the next one starts; the last one ends at the total
duration. With no entries the whole recording becomes a single track.
"""

from __future__ import annotations

from dataclasses import dataclass

from yt2lp.exceptions import PlanningError
from yt2lp.logging import get_logger
from yt2lp.parsing import TimestampEntry
from yt2lp.timecode import format_timecode
from yt2lp.utils import clean_name

logger = get_logger("planning")

COLLISION_POLICIES = ("suffix", "error")


@dataclass(frozen=True)
class Segment:
    """One planned output track."""

    title: str
    start: int
    end: int
    track: int
    total_tracks: int
    filename: str

    @property
    def duration(self) -> int:
        return self.end - self.start

    def label(self) -> str:
        return f"{format_timecode(self.start)}-{format_timecode(self.end)}"


def plan_segments(
    entries: list[TimestampEntry],
    total_duration: float,
    default_title: str,
    on_collision: str = "suffix",
) -> list[Segment]:
    """Turn ordered entries into segments with start/end and track numbers.

    Args:
        entries: Timestamp entries, sorted by start
        total_duration: Length of the recording in seconds
        default_title: Title of the single segment used when entries is empty
        on_collision: "suffix" numbers clashing file names, "error" rejects them

    Returns:
        Segments in track order

    Raises:
        PlanningError: If the duration is not positive, a segment would have
            end <= start, or file names clash under the "error" policy
    """
    if on_collision not in COLLISION_POLICIES:
        raise ValueError(f"on_collision must be one of: {COLLISION_POLICIES}")

    duration = int(total_duration)
    if duration <= 0:
        raise PlanningError(f"Recording duration must be positive, got {total_duration}")

    if not entries:
        logger.info("No timestamps found - exporting as full audio")
        titles = [(default_title, 0, duration)]
    else:
        titles = []
        for index, entry in enumerate(entries):
            end = entries[index + 1].start if index + 1 < len(entries) else duration
            titles.append((entry.title, entry.start, end))

    total = len(titles)
    for index, (title, start, end) in enumerate(titles, start=1):
        if end <= start:
            raise PlanningError(
                f"Track {index} ({title!r}) has an empty range: "
                f"{format_timecode(start)} to {format_timecode(max(end, 0))}"
            )

    filenames = assign_filenames([title for title, _, _ in titles], on_collision)

    return [
        Segment(
            title=title,
            start=start,
            end=end,
            track=index,
            total_tracks=total,
            filename=filename,
        )
        for index, ((title, start, end), filename) in enumerate(zip(titles, filenames), start=1)
    ]


def assign_filenames(titles: list[str], on_collision: str = "suffix") -> list[str]:
    """Sanitize titles into unique file stems.

    Empty results fall back to ``track_NN``. Clashes are compared
    case-insensitively since some file systems are.
    """
    used: set[str] = set()
    names: list[str] = []
    for index, title in enumerate(titles, start=1):
        base = clean_name(title) or f"track_{index:02d}"
        name = base
        if name.lower() in used:
            if on_collision == "error":
                raise PlanningError(f"Track {index} file name {base!r} is already used")
            counter = 2
            while f"{base} ({counter})".lower() in used:
                counter += 1
            name = f"{base} ({counter})"
            logger.warning("Track %d renamed to %r to avoid overwriting", index, name)
        used.add(name.lower())
        names.append(name)
    return names
