"""
yt2lp.config - YAML config loading, environment overlay, validation.

Settings come from (lowest to highest precedence) built-in defaults,
a yt2lp.yaml file, the YT2LP_* environment variables and CLI options.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from yt2lp.exceptions import ConfigError

CONFIG_FILENAME = "yt2lp.yaml"
DEFAULT_CONFIG_DIR = Path("~/.config/yt2lp").expanduser()
DEFAULT_OUTPUT_DIR = Path("~/Music/yt2lp").expanduser()

DEFAULT_TEMP_PATTERNS = ["full_video_temp", ".webm", ".part", ".temp", ".ytdl"]

ENV_VARS: dict[str, str] = {
    "YT2LP_OUTPUT_DIR": "output_dir",
    "YT2LP_MAX_CONCURRENCY": "max_concurrency",
    "YT2LP_SEGMENT_TIMEOUT": "segment_timeout",
    "YT2LP_FETCH_TIMEOUT": "fetch_timeout",
}


class Yt2lpConfig(BaseModel):
    """Resolved configuration for a conversion run."""

    output_dir: Path = DEFAULT_OUTPUT_DIR

    max_concurrency: int = Field(default=4, ge=1, le=64)
    segment_timeout: float | None = Field(default=None, gt=0.0)
    fetch_timeout: float | None = Field(default=None, gt=0.0)

    audio_quality: int = Field(default=2, ge=0, le=9)

    on_invalid_timecode: str = "skip"
    on_name_collision: str = "suffix"

    temp_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_TEMP_PATTERNS))
    keep_source: bool = False

    config_path: Path | None = None

    @field_validator("output_dir")
    @classmethod
    def expand_output_dir(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @field_validator("on_invalid_timecode")
    @classmethod
    def validate_invalid_policy(cls, v: str) -> str:
        valid = {"skip", "abort"}
        if v not in valid:
            raise ValueError(f"on_invalid_timecode must be one of: {valid}")
        return v

    @field_validator("on_name_collision")
    @classmethod
    def validate_collision_policy(cls, v: str) -> str:
        valid = {"suffix", "error"}
        if v not in valid:
            raise ValueError(f"on_name_collision must be one of: {valid}")
        return v


def read_env(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect config overrides from YT2LP_* environment variables."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for var, key in ENV_VARS.items():
        value = environ.get(var)
        if value:
            overrides[key] = value
    return overrides


def find_config_file(path: Path | None = None) -> Path | None:
    """Return the config file to load, or None when there is none."""
    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    for candidate in (Path.cwd() / CONFIG_FILENAME, DEFAULT_CONFIG_DIR / CONFIG_FILENAME):
        if candidate.exists():
            return candidate
    return None


def merge_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides into base. None values never replace a setting."""
    merged = base.copy()
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> Yt2lpConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file; otherwise ./yt2lp.yaml or ~/.config/yt2lp/yt2lp.yaml
        overrides: Values from the command line (None entries are ignored)
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigError: If the file is unreadable or a value fails validation
    """
    raw_config: dict[str, Any] = {}
    config_file = find_config_file(path)
    if config_file is not None:
        try:
            with open(config_file, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read {config_file}: {e}") from e
        if not isinstance(raw_config, dict):
            raise ConfigError(f"{config_file} must contain a mapping")

    merged = merge_config(raw_config, read_env(environ))
    merged = merge_config(merged, overrides or {})
    merged["config_path"] = config_file

    try:
        return Yt2lpConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
