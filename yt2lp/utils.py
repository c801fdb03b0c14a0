"""
yt2lp.utils - Shared utility functions.

Name sanitization and size formatting used by the planner, pipeline and CLI.
"""

from __future__ import annotations

import re
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^\w\s]")


def clean_name(text: str) -> str:
    """Strip everything outside the word/whitespace class and trim.

    Args:
        text: Raw title or album name

    Returns:
        File-system-safe name (may be empty)
    """
    return _UNSAFE_CHARS.sub("", text).strip()


def format_size(path: Path) -> str:
    """Format file size in human-readable format."""
    if not path.exists():
        return "-"
    size = path.stat().st_size
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
