"""
yt2lp.exceptions - Custom exception classes.

All yt2lp-specific exceptions inherit from Yt2lpError.
"""


class Yt2lpError(Exception):
    """Base exception for all yt2lp errors."""

    pass


class ConfigError(Yt2lpError):
    """Configuration loading or validation error."""

    pass


class InputError(Yt2lpError):
    """Unusable user input (URL, timestamp text or file)."""

    pass


class TimecodeError(InputError):
    """A timestamp token could not be parsed or formatted."""

    pass


class FetchError(Yt2lpError):
    """Video metadata lookup or full-audio download failed."""

    pass


class PlanningError(Yt2lpError):
    """Segment plan is inconsistent (empty or overlapping ranges, name clash)."""

    pass


class ExtractionError(Yt2lpError):
    """Audio section extraction error."""

    pass


class TaggingError(Yt2lpError):
    """Tag write failed on an extracted file."""

    pass


class DependencyError(Yt2lpError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
