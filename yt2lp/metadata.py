"""
yt2lp.metadata - Album and per-track tag records.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AlbumMetadata:
    """Tags shared by every track of a run."""

    total_tracks: int
    album: str | None = None
    artist: str | None = None
    genre: int | None = None
    year: int | None = None

    def for_track(self, title: str, track: int) -> TrackMetadata:
        return TrackMetadata(
            title=title,
            track=track,
            total_tracks=self.total_tracks,
            album=self.album,
            artist=self.artist,
            genre=self.genre,
            year=self.year,
        )


@dataclass(frozen=True)
class TrackMetadata:
    """Tags written to one output file."""

    title: str
    track: int
    total_tracks: int
    album: str | None = None
    artist: str | None = None
    genre: int | None = None
    year: int | None = None

    def as_tags(self) -> dict[str, str]:
        """Non-empty tags keyed by EasyID3 / ffmpeg metadata names."""
        tags = {
            "title": self.title,
            "album": self.album,
            "artist": self.artist,
            "genre": str(self.genre) if self.genre is not None else None,
            "date": str(self.year) if self.year else None,
            "tracknumber": f"{self.track}/{self.total_tracks}",
        }
        return {key: value for key, value in tags.items() if value}
