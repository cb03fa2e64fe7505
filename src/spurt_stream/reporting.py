"""Simple text rendering of stream projections for CLI output."""

from __future__ import annotations

from typing import Iterable

from .models import UNTITLED_PLACEHOLDER, Stream, StreamSummary
from .views import ListProjection, Pause, Projection, WallProjection, project, total_duration

BAR_WIDTH = 40


class StreamPrinter:
    """Render human-readable stream views in the console."""

    def __init__(self, paragraph_threshold_ms: float, width: int = BAR_WIDTH) -> None:
        self.paragraph_threshold_ms = paragraph_threshold_ms
        self.width = width

    def print_stream(self, stream: Stream) -> None:
        print(self.render_stream(stream))

    def render_stream(self, stream: Stream) -> str:
        header = (
            f"{stream.display_title} [{stream.view_mode.label}] "
            f"{len(stream.spurts)} spurts, {format_seconds(total_duration(stream.spurts))}"
        )
        lines = [header, "-" * max(len(header), self.width)]
        if not stream.spurts:
            lines.append("(no spurts recorded)")
            return "\n".join(lines)
        lines.append(self.render(project(stream, self.paragraph_threshold_ms)))
        return "\n".join(lines)

    def render(self, projection: Projection) -> str:
        if isinstance(projection, WallProjection):
            return render_wall(projection)
        return self.render_list(projection)

    def render_list(self, projection: ListProjection) -> str:
        text_width = max((len(entry.spurt.text) for entry in projection.entries), default=0)
        lines: list[str] = []
        for entry in projection.entries:
            lines.append(f"{entry.spurt.text:<{text_width}}  {format_seconds(entry.spurt.duration):>6}")
            if entry.pause_after is not None:
                lines.append(self.render_pause(entry.pause_after))
        return "\n".join(lines)

    def render_pause(self, pause: Pause) -> str:
        if pause.is_paragraph_break:
            bar = "=" * self.width
        else:
            cells = max(1, round(pause.width_percent / 100 * self.width))
            bar = ("-" * cells).center(self.width)
        label = format_seconds(pause.seconds) if pause.show_label else ""
        return f"{bar}  {label:>6}".rstrip()


def render_wall(projection: WallProjection) -> str:
    paragraphs: list[list[str]] = []
    for token in projection.tokens:
        if token.paragraph_break_before or not paragraphs:
            paragraphs.append([])
        paragraphs[-1].append(token.spurt.text)
    return "\n\n".join(" ".join(words) for words in paragraphs)


def render_listing(summaries: Iterable[StreamSummary]) -> str:
    lines = []
    for summary in summaries:
        marker = "*" if summary.is_active else " "
        flag = " (docked)" if summary.minimized else ""
        lines.append(
            f"{marker} {summary.title or UNTITLED_PLACEHOLDER:<30} {summary.view_mode.value:<9}"
            f" {summary.spurt_count:>4} {format_seconds(summary.total_duration):>8}{flag}"
        )
    return "\n".join(lines)


def format_seconds(seconds: float) -> str:
    return f"{seconds:.1f}s"
