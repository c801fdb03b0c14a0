"""
yt2lp.logging - Centralized logging configuration.

Every module logs under the "yt2lp" hierarchy; verbose mode turns on DEBUG.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("yt2lp")


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``yt2lp.parsing``."""
    return logger.getChild(name)


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the yt2lp package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logger.setLevel(level)
