"""
yt2lp.transcode - FFmpeg trimming and ID3 tagging.

Cuts [start, end) out of the shared full-length MP3 into a new file with
ffmpeg, then writes tags with mutagen. A tag failure leaves the trimmed file
in place, untagged.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path

from yt2lp.exceptions import DependencyError, ExtractionError, TaggingError
from yt2lp.logging import get_logger
from yt2lp.metadata import TrackMetadata

logger = get_logger("transcode")

_STDERR_TAIL = 800


@dataclass(frozen=True)
class TranscodeOutcome:
    """Result of one successful trim."""

    path: Path
    tagged: bool
    tag_error: str | None = None


def check_dependencies() -> str:
    """Return the ffmpeg executable path.

    Raises:
        DependencyError: If ffmpeg is not on PATH
    """
    ffmpeg = shutil.which("ffmpeg")
    if ffmpeg is None:
        raise DependencyError(
            "ffmpeg",
            "not installed or not on PATH",
            install_hint="brew install ffmpeg / apt install ffmpeg",
        )
    return ffmpeg


def build_ffmpeg_command(
    source: Path,
    start: float,
    end: float,
    dest: Path,
    quality: int = 2,
    ffmpeg: str = "ffmpeg",
) -> list[str]:
    """Build the ffmpeg command that trims source into dest as MP3."""
    return [
        ffmpeg,
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(source),
        "-ss",
        str(start),
        "-to",
        str(end),
        "-vn",
        "-acodec",
        "libmp3lame",
        "-q:a",
        str(quality),
        str(dest),
    ]


def tag_file(path: Path, metadata: TrackMetadata) -> None:
    """Write ID3 tags to an MP3 file.

    Raises:
        TaggingError: If mutagen cannot open or save the file
    """
    from mutagen.easyid3 import EasyID3
    from mutagen.id3 import ID3NoHeaderError

    try:
        try:
            audio = EasyID3(str(path))
        except ID3NoHeaderError:
            audio = EasyID3()
        for key, value in metadata.as_tags().items():
            audio[key] = [value]
        audio.save(str(path))
    except Exception as e:
        raise TaggingError(f"Could not tag {path.name}: {e}") from e


class FfmpegTranscoder:
    """Transcoder running ffmpeg as an asyncio subprocess."""

    def __init__(self, quality: int = 2, ffmpeg: str = "ffmpeg") -> None:
        self.quality = quality
        self.ffmpeg = ffmpeg

    async def transcode(
        self,
        source: Path,
        start: float,
        end: float,
        dest: Path,
        metadata: TrackMetadata,
    ) -> TranscodeOutcome:
        """Trim source into dest and tag it.

        Raises:
            ExtractionError: If the range is empty or ffmpeg fails
            DependencyError: If ffmpeg cannot be started
        """
        if end <= start:
            raise ExtractionError(f"Invalid time range: {start} to {end}")

        cmd = build_ffmpeg_command(source, start, end, dest, self.quality, self.ffmpeg)
        logger.debug("Running %s", " ".join(cmd))

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise DependencyError(self.ffmpeg, "not installed or not on PATH") from e

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # Timeouts cancel us; don't leave ffmpeg writing a half file
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            message = stderr.decode(errors="replace").strip()[-_STDERR_TAIL:]
            raise ExtractionError(f"ffmpeg process failed with code {proc.returncode}: {message}")

        try:
            tag_file(dest, metadata)
        except TaggingError as e:
            logger.warning("%s - keeping untagged file", e)
            return TranscodeOutcome(path=dest, tagged=False, tag_error=str(e))

        return TranscodeOutcome(path=dest, tagged=True)
