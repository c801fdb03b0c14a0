"""
yt2lp.pipeline - URL to tagged album, end to end.

validate URL -> fetch info -> find timestamps -> plan segments ->
download full audio -> extract segments -> RunReport.

Input, fetch and planning errors stop the run before anything is extracted;
per-segment failures only show up in the report.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from yt2lp.config import Yt2lpConfig
from yt2lp.exceptions import FetchError
from yt2lp.fetch import VideoInfo, YtDlpFetcher, validate_url
from yt2lp.genres import get_genre_code
from yt2lp.logging import get_logger
from yt2lp.metadata import AlbumMetadata
from yt2lp.orchestrator import Orchestrator, RunReport, Transcoder
from yt2lp.parsing import TimestampEntry, parse_timestamps, read_timestamp_source
from yt2lp.planning import Segment, plan_segments
from yt2lp.transcode import FfmpegTranscoder, check_dependencies
from yt2lp.utils import clean_name

logger = get_logger("pipeline")

SOURCE_STEM = "full_video_temp"


@dataclass(frozen=True)
class ConvertOptions:
    """User-supplied album details; None means "derive from the video"."""

    artist: str | None = None
    album: str | None = None
    year: int | None = None
    genre: str | None = None
    timestamps: str | None = None


@dataclass(frozen=True)
class RunResult:
    info: VideoInfo
    album: AlbumMetadata
    album_dir: Path
    segments: list[Segment]
    report: RunReport


def find_entries(
    options: ConvertOptions,
    info: VideoInfo,
    on_invalid: str = "skip",
) -> list[TimestampEntry]:
    """Timestamps from --timestamps first, then from the video description."""
    entries: list[TimestampEntry] = []
    if options.timestamps:
        text = read_timestamp_source(options.timestamps)
        entries = parse_timestamps(text, on_invalid=on_invalid)
        if not entries:
            logger.warning("No timestamps found in the supplied text")

    if not entries:
        logger.info("Searching for timestamps in video description...")
        entries = parse_timestamps(info.description, on_invalid=on_invalid)
    return entries


def build_album(options: ConvertOptions, info: VideoInfo, total_tracks: int) -> AlbumMetadata:
    genre = get_genre_code(options.genre)
    if options.genre and genre is None:
        logger.warning("Unknown genre %r - tracks will have no genre tag", options.genre)
    return AlbumMetadata(
        total_tracks=total_tracks,
        album=options.album or info.title or None,
        artist=options.artist,
        genre=genre,
        year=options.year or info.year,
    )


def album_directory(output_dir: Path, album_name: str | None) -> Path:
    return output_dir / (clean_name(album_name or "") or "untitled")


def discard_partial_download(orchestrator: Orchestrator, album_dir: Path, created: bool) -> None:
    """Remove what a failed download left behind in album_dir.

    The album folder itself is removed too when this run created it and it
    is now empty.
    """
    orchestrator.cleanup(album_dir / f"{SOURCE_STEM}.mp3", album_dir)
    if created and album_dir.is_dir() and not any(album_dir.iterdir()):
        album_dir.rmdir()
        logger.debug("Removed empty album folder %s", album_dir)


async def arun_pipeline(
    url: str,
    options: ConvertOptions,
    config: Yt2lpConfig,
    fetcher: YtDlpFetcher | None = None,
    transcoder: Transcoder | None = None,
) -> RunResult:
    """Convert one video into an album directory.

    Raises:
        InputError: Bad URL, unreadable timestamp file or aborted timecode
        FetchError: Metadata lookup or download failed
        PlanningError: Timestamps produce an empty segment or a name clash
        DependencyError: ffmpeg is missing
    """
    url = validate_url(url)
    if transcoder is None:
        ffmpeg = check_dependencies()
        transcoder = FfmpegTranscoder(quality=config.audio_quality, ffmpeg=ffmpeg)
    fetcher = fetcher or YtDlpFetcher(
        timeout=config.fetch_timeout,
        audio_quality=str(config.audio_quality),
    )

    info = await fetcher.afetch_info(url)
    logger.info("Converting %s...", info.title)

    entries = find_entries(options, info, on_invalid=config.on_invalid_timecode)
    album_name = options.album or info.title or "untitled"
    segments = plan_segments(
        entries,
        info.duration,
        default_title=album_name,
        on_collision=config.on_name_collision,
    )
    album = build_album(options, info, total_tracks=len(segments))

    album_dir = album_directory(config.output_dir, album.album)
    created = not album_dir.exists()
    album_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Album being saved at %s", album_dir)

    orchestrator = Orchestrator(
        transcoder,
        max_concurrency=config.max_concurrency,
        segment_timeout=config.segment_timeout,
        temp_patterns=config.temp_patterns,
        keep_source=config.keep_source,
    )

    try:
        source = await fetcher.adownload_audio(info.url, album_dir / SOURCE_STEM)
    except FetchError:
        discard_partial_download(orchestrator, album_dir, created)
        raise

    report = await orchestrator.run(segments, source, album, album_dir)

    return RunResult(
        info=info,
        album=album,
        album_dir=album_dir,
        segments=segments,
        report=report,
    )


def run_pipeline(
    url: str,
    options: ConvertOptions,
    config: Yt2lpConfig,
    fetcher: YtDlpFetcher | None = None,
    transcoder: Transcoder | None = None,
) -> RunResult:
    """Blocking entry point used by the CLI."""
    return asyncio.run(arun_pipeline(url, options, config, fetcher, transcoder))
