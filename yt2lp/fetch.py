"""
yt2lp.fetch - Video metadata and full-audio download via yt-dlp.

The fetcher resolves a URL to a VideoInfo and downloads the whole audio
track once as MP3. Downloads retry once with a simpler option set, the same
way the command-line tool is usually coaxed into working.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from yt2lp.exceptions import FetchError, InputError
from yt2lp.logging import get_logger

logger = get_logger("fetch")

T = TypeVar("T")

_URL_RE = re.compile(
    r"^((?:https?:)?//)?((?:www|m|music)\.)?((?:youtube\.com|youtu\.be))"
    r"(/(?:[\w\-]+\?v=|embed/|v/|shorts/)?)([\w\-]+)(\S+)?$"
)


@dataclass(frozen=True)
class VideoInfo:
    """What the rest of the pipeline needs to know about a video."""

    url: str
    title: str
    description: str
    duration: float
    year: int | None = None


def validate_url(url: str | None) -> str:
    """Check that url points at a single YouTube video.

    Raises:
        InputError: If the URL is missing or not a YouTube URL
    """
    if not url or not url.strip():
        raise InputError("You must input a YouTube URL")
    url = url.strip()
    if not _URL_RE.match(url):
        raise InputError(f"Not a valid YouTube URL: {url}")
    return url


def info_from_dict(url: str, info: dict[str, Any]) -> VideoInfo:
    """Build a VideoInfo from a yt-dlp info dict."""
    duration = info.get("duration")
    if not duration:
        raise FetchError(f"No duration reported for {url}")

    year = info.get("release_year")
    if not year:
        upload_date = str(info.get("upload_date") or "")
        year = int(upload_date[:4]) if upload_date[:4].isdigit() else None

    return VideoInfo(
        url=info.get("webpage_url") or url,
        title=info.get("title") or "",
        description=info.get("description") or "",
        duration=float(duration),
        year=int(year) if year else None,
    )


class YtDlpFetcher:
    """Fetcher backed by the yt_dlp library."""

    def __init__(self, timeout: float | None = None, audio_quality: str = "0") -> None:
        self.timeout = timeout
        self.audio_quality = audio_quality

    def _base_options(self) -> dict[str, Any]:
        return {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
        }

    def _download_options(self, dest_stem: Path, simple: bool = False) -> dict[str, Any]:
        postprocessor: dict[str, Any] = {
            "key": "FFmpegExtractAudio",
            "preferredcodec": "mp3",
        }
        options: dict[str, Any] = {
            "outtmpl": f"{dest_stem}.%(ext)s",
            "keepvideo": False,
            "postprocessors": [postprocessor],
        }
        if simple:
            options["quiet"] = True
            options["noplaylist"] = True
            return options

        postprocessor["preferredquality"] = self.audio_quality
        options.update(self._base_options())
        options.update(
            {
                "format": "bestaudio/best",
                "nocheckcertificate": True,
                "prefer_free_formats": True,
            }
        )
        return options

    def fetch_info(self, url: str) -> VideoInfo:
        """Look up title, description, duration and year without downloading.

        Raises:
            FetchError: If yt-dlp cannot resolve the video
        """
        import yt_dlp

        logger.debug("Getting video info for %s", url)
        options = {**self._base_options(), "skip_download": True}
        try:
            with yt_dlp.YoutubeDL(options) as ydl:
                info = ydl.extract_info(url, download=False)
        except Exception as e:
            raise FetchError(f"Error getting video data: {e}") from e

        if not info:
            raise FetchError(f"No video data returned for {url}")
        return info_from_dict(url, info)

    def download_audio(self, url: str, dest_stem: Path) -> Path:
        """Download the full audio track as ``<dest_stem>.mp3``.

        Raises:
            FetchError: If both the full and the simplified attempt fail
        """
        import yt_dlp

        dest_stem.parent.mkdir(parents=True, exist_ok=True)
        target = Path(f"{dest_stem}.mp3")
        last_error: Exception | None = None

        for simple in (False, True):
            if simple:
                logger.warning("Retrying download with simpler options")
            try:
                with yt_dlp.YoutubeDL(self._download_options(dest_stem, simple)) as ydl:
                    code = ydl.download([url])
                if code == 0 and target.exists():
                    logger.info("Full audio track downloaded to %s", target)
                    return target
                last_error = FetchError(f"yt-dlp exited with code {code}")
            except Exception as e:
                last_error = e
                logger.debug("Download attempt failed: %s", e)

        raise FetchError(f"Error getting the full audio file: {last_error}") from last_error

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking yt-dlp call in its own thread, bounded by self.timeout.

        Each call gets a private executor. On timeout the call is abandoned and
        its thread finishes on its own; asyncio.run does not wait for it.
        """
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="yt2lp-fetch")
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(executor, func, *args),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise FetchError(f"{func.__name__} timed out after {self.timeout}s") from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    async def afetch_info(self, url: str) -> VideoInfo:
        return await self._run(self.fetch_info, url)

    async def adownload_audio(self, url: str, dest_stem: Path) -> Path:
        return await self._run(self.download_audio, url, dest_stem)
