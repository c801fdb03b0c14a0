"""
yt2lp.cli - Typer CLI entry point.

Provides the convert, timestamps and init-config subcommands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from yt2lp import __version__
from yt2lp.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG_DIR,
    Yt2lpConfig,
    load_config,
    write_config,
)
from yt2lp.exceptions import DependencyError, Yt2lpError
from yt2lp.logging import configure_logging
from yt2lp.orchestrator import RunReport
from yt2lp.parsing import parse_timestamps, read_timestamp_source
from yt2lp.pipeline import ConvertOptions, run_pipeline
from yt2lp.planning import Segment, plan_segments
from yt2lp.timecode import format_timecode
from yt2lp.utils import format_size

app = typer.Typer(
    name="yt2lp",
    help="Convert YouTube videos to custom MP3 albums.\n\n"
    "Splits the audio of one video into tagged tracks using the timestamps "
    "in its description (or ones you pass in).",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"yt2lp {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """yt2lp - convert YouTube videos to custom MP3 albums."""
    pass


def segments_table(segments: list[Segment], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Start", style="green")
    table.add_column("End", style="green")
    table.add_column("File", style="yellow")
    for segment in segments:
        table.add_row(
            str(segment.track),
            segment.title,
            format_timecode(segment.start),
            format_timecode(segment.end),
            f"{segment.filename}.mp3",
        )
    return table


def report_table(report: RunReport) -> Table:
    table = Table(title="Extraction")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Track", style="cyan")
    table.add_column("Size", style="green")
    table.add_column("Status", style="yellow")
    for result in report.results:
        if result.ok:
            status = "[green]✓ Extracted[/green]"
            if not result.tagged:
                status = "[yellow]✓ Extracted (untagged)[/yellow]"
            size = format_size(result.path)
        else:
            status = f"[red]Error: {result.error}[/red]"
            size = "-"
        table.add_row(str(result.segment.track), result.segment.title, size, status)
    return table


@app.command("convert")
def convert(
    url: str = typer.Argument(..., help="YouTube video URL (wrap it in quotes)"),
    artist: str | None = typer.Option(None, "--artist", "-a", help="Artist name"),
    album: str | None = typer.Option(None, "--album", "-A", help="Album name"),
    year: int | None = typer.Option(None, "--year", "-y", help="Album year"),
    genre: str | None = typer.Option(None, "--genre", "-g", help="Genre name"),
    timestamps: str | None = typer.Option(
        None,
        "--timestamps",
        "-t",
        help="Custom timestamps: literal text or a path to a .txt file",
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Root folder for albums (default: $YT2LP_OUTPUT_DIR)"
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", help="Tracks extracted at once"),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Seconds allowed per track before it counts as failed"
    ),
    keep_source: bool = typer.Option(False, "--keep-source", help="Keep the full-length download"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to yt2lp.yaml"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Download a video's audio and split it into a tagged album."""
    configure_logging(verbose)

    try:
        config = load_config(
            config_path,
            overrides={
                "output_dir": output_dir,
                "max_concurrency": jobs,
                "segment_timeout": timeout,
                "keep_source": keep_source or None,
            },
        )
        options = ConvertOptions(
            artist=artist,
            album=album,
            year=year,
            genre=genre,
            timestamps=timestamps,
        )
        console.print("[dim]Searching for timestamps and downloading audio...[/dim]")
        result = run_pipeline(url, options, config)
    except DependencyError as e:
        console.print(f"[red]Error: {e}[/red]")
        if e.install_hint:
            console.print(f"[dim]  Install with: {e.install_hint}[/dim]")
        raise typer.Exit(1)
    except Yt2lpError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    report = result.report
    console.print(segments_table(result.segments, result.album.album or "Album"))
    console.print(report_table(report))
    for error in report.cleanup_errors:
        console.print(f"[yellow]Could not remove {error}[/yellow]")

    succeeded = len(report.succeeded)
    total = len(report.results)
    if succeeded == 0:
        console.print(f"\n[red]✗ No tracks extracted ({total} failed)[/red]")
        raise typer.Exit(2)
    if report.failed:
        console.print(f"\n[yellow]Album converted with {total - succeeded} failed track(s)[/yellow]")
    else:
        console.print("\n[green]✓[/green] Album successfully converted!")
    console.print(f"[dim]  {result.album_dir}[/dim]")


@app.command("timestamps")
def preview_timestamps(
    source: str = typer.Argument(..., help="Timestamp text or a path to a .txt file"),
    duration: float | None = typer.Option(
        None, "--duration", "-d", help="Recording length in seconds (default: last start + 1)"
    ),
    title: str = typer.Option("Untitled", "--title", help="Title used when nothing is found"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unparsable timecodes"),
) -> None:
    """Preview how timestamp text would be split, without downloading."""
    try:
        text = read_timestamp_source(source)
        entries = parse_timestamps(text, on_invalid="abort" if strict else "skip")
        if duration is None:
            duration = entries[-1].start + 1 if entries else 1
        segments = plan_segments(entries, duration, default_title=title)
    except Yt2lpError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not entries:
        console.print("[yellow]No timestamps found - the full audio becomes one track[/yellow]")
    console.print(segments_table(segments, f"{len(segments)} track(s)"))


@app.command("init-config")
def init_config(
    path: Path = typer.Option(
        DEFAULT_CONFIG_DIR / CONFIG_FILENAME, "--path", "-p", help="Where to write the config"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a yt2lp.yaml with the default settings."""
    if path.exists() and not force:
        console.print(f"[red]Error: '{path}' already exists[/red]")
        raise typer.Exit(1)

    config = Yt2lpConfig()
    data = config.model_dump(mode="json", exclude={"config_path"})
    write_config(data, path)
    console.print(f"[green]✓[/green] Wrote {path}")
