"""Command-line interface for spurt streams."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import (
    MAX_THRESHOLD_MS,
    MIN_CUT_THRESHOLD_MS,
    MIN_PARAGRAPH_THRESHOLD_MS,
    SegmentationSettings,
)
from .models import ViewMode
from .paths import get_log_path
from .server_runner import run_dashboard

app = typer.Typer(help="Segment live typing into spurts and paragraphs.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_to_file: bool = typer.Option(
        False, "--log-to-file", help="Also write logs to the user log directory."
    ),
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to_file:
        handlers.append(logging.FileHandler(get_log_path(), encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    cut_ms: float = typer.Option(
        1500,
        "--cut",
        min=MIN_CUT_THRESHOLD_MS,
        max=MAX_THRESHOLD_MS,
        help="Milliseconds of silence that finish a spurt.",
    ),
    paragraph_ms: float = typer.Option(
        10000,
        "--paragraph",
        min=MIN_PARAGRAPH_THRESHOLD_MS,
        max=MAX_THRESHOLD_MS,
        help="Milliseconds of silence between spurts that open a paragraph.",
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Start the local dashboard that records typing into streams."""
    settings = SegmentationSettings.from_milliseconds(cut_ms=cut_ms, paragraph_ms=paragraph_ms)
    run_dashboard(host=host, port=port, settings=settings, open_browser=open_browser)


@app.command()
def replay(
    events_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON Lines file of {\"text\", \"timestamp\"} input events.",
    ),
    cut_ms: float = typer.Option(
        1500,
        "--cut",
        min=MIN_CUT_THRESHOLD_MS,
        max=MAX_THRESHOLD_MS,
        help="Milliseconds of silence that finish a spurt.",
    ),
    paragraph_ms: float = typer.Option(
        10000,
        "--paragraph",
        min=MIN_PARAGRAPH_THRESHOLD_MS,
        max=MAX_THRESHOLD_MS,
        help="Milliseconds of silence between spurts that open a paragraph.",
    ),
    view: ViewMode = typer.Option(
        ViewMode.WALL, "--view", case_sensitive=False, help="Layout to print."
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Title for the stream."),
) -> None:
    """Segment a recorded keystroke log and print the resulting stream."""
    from .replay import load_events, replay_events
    from .reporting import StreamPrinter

    settings = SegmentationSettings.from_milliseconds(cut_ms=cut_ms, paragraph_ms=paragraph_ms)
    events = load_events(events_path)
    if not events:
        typer.echo("No input events found.")
        raise typer.Exit(code=1)

    engine = replay_events(events, settings)
    registry = engine.registry
    stream_id = registry.active_stream_id
    if title is not None:
        registry.rename_stream(stream_id, title)
    for _ in ViewMode:
        if registry.get_stream(stream_id).view_mode is view:
            break
        registry.cycle_view_mode(stream_id)

    printer = StreamPrinter(settings.paragraph_threshold_ms)
    printer.print_stream(registry.get_stream(stream_id))
