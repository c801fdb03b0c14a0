"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from yt2lp.config import Yt2lpConfig
from yt2lp.exceptions import ExtractionError, FetchError
from yt2lp.fetch import VideoInfo
from yt2lp.metadata import AlbumMetadata, TrackMetadata
from yt2lp.parsing import TimestampEntry
from yt2lp.planning import Segment
from yt2lp.transcode import TranscodeOutcome


class FakeTranscoder:
    """Writes a placeholder file instead of running ffmpeg.

    Titles listed in fail fail with ExtractionError, titles in slow sleep
    for the given seconds first.
    """

    def __init__(
        self,
        fail: set[str] | None = None,
        slow: dict[str, float] | None = None,
        untagged: set[str] | None = None,
    ) -> None:
        self.fail = fail or set()
        self.slow = slow or {}
        self.untagged = untagged or set()
        self.calls: list[tuple[Path, float, float, Path, TrackMetadata]] = []
        self.running = 0
        self.max_running = 0

    async def transcode(
        self,
        source: Path,
        start: float,
        end: float,
        dest: Path,
        metadata: TrackMetadata,
    ) -> TranscodeOutcome:
        self.calls.append((source, start, end, dest, metadata))
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            await asyncio.sleep(self.slow.get(metadata.title, 0.01))
            if metadata.title in self.fail:
                raise ExtractionError(f"ffmpeg process failed with code 1: {metadata.title}")
            dest.write_bytes(b"ID3fake")
            return TranscodeOutcome(path=dest, tagged=metadata.title not in self.untagged)
        finally:
            self.running -= 1


class FakeFetcher:
    """Returns canned VideoInfo and writes a placeholder download.

    With fail_download it leaves a partial file behind and raises FetchError.
    """

    def __init__(self, info: VideoInfo, fail_download: bool = False) -> None:
        self.info = info
        self.fail_download = fail_download
        self.downloads: list[Path] = []

    async def afetch_info(self, url: str) -> VideoInfo:
        return self.info

    async def adownload_audio(self, url: str, dest_stem: Path) -> Path:
        if self.fail_download:
            Path(f"{dest_stem}.webm.part").write_bytes(b"partial")
            raise FetchError("Error getting the full audio file")
        target = Path(f"{dest_stem}.mp3")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"full audio")
        self.downloads.append(target)
        return target


@pytest.fixture
def sample_description() -> str:
    return "Intro - 0:00\nSong One - 1:24\nSong Two - 5:32"


@pytest.fixture
def sample_entries() -> list[TimestampEntry]:
    return [
        TimestampEntry(title="Intro", start=0, token="0:00"),
        TimestampEntry(title="Song One", start=84, token="1:24"),
        TimestampEntry(title="Song Two", start=332, token="5:32"),
    ]


@pytest.fixture
def sample_segments() -> list[Segment]:
    return [
        Segment(title="Intro", start=0, end=84, track=1, total_tracks=3, filename="Intro"),
        Segment(title="Song One", start=84, end=332, track=2, total_tracks=3, filename="Song One"),
        Segment(title="Song Two", start=332, end=600, track=3, total_tracks=3, filename="Song Two"),
    ]


@pytest.fixture
def sample_album() -> AlbumMetadata:
    return AlbumMetadata(
        total_tracks=3,
        album="Tiny Desk Concert",
        artist="Mac Miller",
        genre=20,
        year=2018,
    )


@pytest.fixture
def sample_video() -> VideoInfo:
    return VideoInfo(
        url="https://www.youtube.com/watch?v=QrR_gm6RqCo",
        title="Mac Miller: Tiny Desk Concert",
        description="0:00 Small Worlds\n4:12 What's The Use?\n9:05 2009",
        duration=900.0,
        year=2018,
    )


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    album_dir = tmp_path / "album"
    album_dir.mkdir()
    source = album_dir / "full_video_temp.mp3"
    source.write_bytes(b"full audio")
    return source


@pytest.fixture
def test_config(tmp_path: Path) -> Yt2lpConfig:
    return Yt2lpConfig(output_dir=tmp_path / "music", max_concurrency=2)
