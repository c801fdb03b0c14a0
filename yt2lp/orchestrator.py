"""
yt2lp.orchestrator - Per-segment extraction with a bounded worker pool.

Every segment of the plan is trimmed out of the same source file by a
Transcoder. Segments go through a queue drained by at most max_concurrency
workers, so a 40-track album never starts 40 ffmpeg processes at once. Each
segment succeeds or fails on its own; once all of them have settled the
source file and leftover temporary files are removed, exactly once.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from yt2lp.config import DEFAULT_TEMP_PATTERNS
from yt2lp.logging import get_logger
from yt2lp.metadata import AlbumMetadata, TrackMetadata
from yt2lp.planning import Segment
from yt2lp.transcode import TranscodeOutcome

logger = get_logger("orchestrator")

OUTPUT_SUFFIX = ".mp3"


class Transcoder(Protocol):
    async def transcode(
        self,
        source: Path,
        start: float,
        end: float,
        dest: Path,
        metadata: TrackMetadata,
    ) -> TranscodeOutcome: ...


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome for one segment: an output path or a failure reason."""

    segment: Segment
    path: Path | None = None
    error: str | None = None
    tagged: bool = False
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None


@dataclass
class RunReport:
    """Per-segment results in plan order, plus what cleanup did."""

    results: list[ExtractionResult]
    cleaned: list[Path] = field(default_factory=list)
    cleanup_errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ExtractionResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[ExtractionResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return bool(self.results) and not self.failed


def output_path(dest_dir: Path, segment: Segment) -> Path:
    return dest_dir / f"{segment.filename}{OUTPUT_SUFFIX}"


class Orchestrator:
    """Runs a segment plan against one shared source file."""

    def __init__(
        self,
        transcoder: Transcoder,
        max_concurrency: int = 4,
        segment_timeout: float | None = None,
        temp_patterns: list[str] | None = None,
        keep_source: bool = False,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.transcoder = transcoder
        self.max_concurrency = max_concurrency
        self.segment_timeout = segment_timeout
        self.temp_patterns = list(DEFAULT_TEMP_PATTERNS if temp_patterns is None else temp_patterns)
        self.keep_source = keep_source

    async def run(
        self,
        segments: list[Segment],
        source: Path,
        album: AlbumMetadata,
        dest_dir: Path,
    ) -> RunReport:
        """Extract every segment, then clean up.

        Args:
            segments: Planned segments (track order)
            source: Full-length audio file, read-only for every worker
            album: Tags shared by all tracks
            dest_dir: Existing output directory

        Returns:
            RunReport with one result per segment, in plan order
        """
        results: list[ExtractionResult | None] = [None] * len(segments)
        queue: asyncio.Queue[tuple[int, Segment]] = asyncio.Queue()
        for index, segment in enumerate(segments):
            queue.put_nowait((index, segment))

        async def worker() -> None:
            while True:
                try:
                    index, segment = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                results[index] = await self._extract(segment, source, album, dest_dir)

        workers = min(self.max_concurrency, len(segments))
        logger.info("Extracting %d segment(s) with %d worker(s)", len(segments), workers)
        try:
            await asyncio.gather(*(worker() for _ in range(workers)))
        finally:
            produced = {output_path(dest_dir, s) for s in segments}
            cleaned, cleanup_errors = self.cleanup(source, dest_dir, keep=produced)

        return RunReport(
            results=[r for r in results if r is not None],
            cleaned=cleaned,
            cleanup_errors=cleanup_errors,
        )

    async def _extract(
        self,
        segment: Segment,
        source: Path,
        album: AlbumMetadata,
        dest_dir: Path,
    ) -> ExtractionResult:
        metadata = album.for_track(segment.title, segment.track)
        dest = output_path(dest_dir, segment)
        logger.info(
            "Processing track %d/%d: %s (%s)",
            segment.track,
            segment.total_tracks,
            segment.title,
            segment.label(),
        )

        started = time.monotonic()
        try:
            outcome = await asyncio.wait_for(
                self.transcoder.transcode(source, segment.start, segment.end, dest, metadata),
                timeout=self.segment_timeout,
            )
        except asyncio.TimeoutError:
            error = f"timed out after {self.segment_timeout}s"
        except Exception as e:
            error = str(e) or type(e).__name__
        else:
            elapsed = time.monotonic() - started
            logger.info("%s successfully extracted", segment.title)
            return ExtractionResult(
                segment=segment,
                path=outcome.path,
                tagged=outcome.tagged,
                elapsed=elapsed,
            )

        logger.error("Error extracting %s: %s", segment.title, error)
        return ExtractionResult(segment=segment, error=error, elapsed=time.monotonic() - started)

    def cleanup(
        self,
        source: Path,
        dest_dir: Path,
        keep: set[Path] | None = None,
    ) -> tuple[list[Path], list[str]]:
        """Remove the source file and temporary leftovers in dest_dir.

        Returns:
            (removed paths, error messages); errors never raise
        """
        keep = keep or set()
        candidates: list[Path] = []
        if not self.keep_source:
            candidates.append(source)
        if dest_dir.is_dir():
            for path in sorted(dest_dir.iterdir()):
                if path in keep or path == source or not path.is_file():
                    continue
                if any(marker in path.name for marker in self.temp_patterns):
                    candidates.append(path)

        removed: list[Path] = []
        errors: list[str] = []
        for path in candidates:
            if not path.exists():
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.warning("Error removing %s: %s", path.name, e)
                errors.append(f"{path.name}: {e}")
                continue
            logger.debug("Removed temporary file %s", path.name)
            removed.append(path)
        return removed, errors


def extract_segments(
    segments: list[Segment],
    source: Path,
    album: AlbumMetadata,
    dest_dir: Path,
    transcoder: Transcoder,
    max_concurrency: int = 4,
    segment_timeout: float | None = None,
    temp_patterns: list[str] | None = None,
    keep_source: bool = False,
) -> RunReport:
    """Blocking wrapper around Orchestrator.run for callers without a loop."""
    orchestrator = Orchestrator(
        transcoder,
        max_concurrency=max_concurrency,
        segment_timeout=segment_timeout,
        temp_patterns=temp_patterns,
        keep_source=keep_source,
    )
    return asyncio.run(orchestrator.run(segments, source, album, dest_dir))
