"""Read-only projections of a stream's spurts for display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from .classifier import gap_ms
from .models import Spurt, Stream, ViewMode

GAP_LABEL_MIN_SECONDS = 0.5


@dataclass(slots=True, frozen=True)
class WallToken:
    spurt: Spurt
    paragraph_break_before: bool


@dataclass(slots=True, frozen=True)
class Pause:
    """The silence drawn between two adjacent list items."""

    gap_ms: float
    is_paragraph_break: bool
    width_percent: float

    @property
    def seconds(self) -> float:
        return self.gap_ms / 1000

    @property
    def show_label(self) -> bool:
        return self.seconds > GAP_LABEL_MIN_SECONDS


@dataclass(slots=True, frozen=True)
class ListEntry:
    spurt: Spurt
    pause_after: Pause | None


@dataclass(slots=True, frozen=True)
class WallProjection:
    tokens: tuple[WallToken, ...]
    total_duration: float
    mode: ViewMode = ViewMode.WALL


@dataclass(slots=True, frozen=True)
class ListProjection:
    mode: ViewMode
    entries: tuple[ListEntry, ...]
    total_duration: float


Projection = Union[WallProjection, ListProjection]


def total_duration(spurts: Iterable[Spurt]) -> float:
    return sum(spurt.duration for spurt in spurts)


def pause_width_percent(gap: float, paragraph_threshold_ms: float) -> float:
    """Scale a pause against the paragraph threshold, capped at 100%."""
    if paragraph_threshold_ms <= 0:
        return 100.0
    return min(100.0, max(0.0, gap) / paragraph_threshold_ms * 100)


def project(stream: Stream, paragraph_threshold_ms: float) -> Projection:
    """Derive the stream's current view; nothing is cached on the stream."""
    spurts = stream.spurts
    if stream.view_mode is ViewMode.WALL:
        return project_wall(spurts)
    if stream.view_mode is ViewMode.REVERSED:
        return project_reversed(spurts, paragraph_threshold_ms)
    return project_ordered(spurts, paragraph_threshold_ms)


def project_wall(spurts: Sequence[Spurt]) -> WallProjection:
    tokens = tuple(
        WallToken(spurt=spurt, paragraph_break_before=index > 0 and spurt.is_paragraph_start)
        for index, spurt in enumerate(spurts)
    )
    return WallProjection(tokens=tokens, total_duration=total_duration(spurts))


def project_ordered(
    spurts: Sequence[Spurt], paragraph_threshold_ms: float
) -> ListProjection:
    entries = []
    for index, spurt in enumerate(spurts):
        pause = None
        if index + 1 < len(spurts):
            following = spurts[index + 1]
            pause = _pause(
                gap_ms(spurt, following),
                following.is_paragraph_start,
                paragraph_threshold_ms,
            )
        entries.append(ListEntry(spurt=spurt, pause_after=pause))
    return ListProjection(
        mode=ViewMode.ORDERED,
        entries=tuple(entries),
        total_duration=total_duration(spurts),
    )


def project_reversed(
    spurts: Sequence[Spurt], paragraph_threshold_ms: float
) -> ListProjection:
    displayed = list(reversed(spurts))
    entries = []
    for index, spurt in enumerate(displayed):
        pause = None
        if index + 1 < len(displayed):
            older = displayed[index + 1]
            # Keyed to the newer, displayed item's own flag, so the divider
            # sits below the spurt that opened the paragraph. Ordered mode
            # keys off the following spurt instead; both placements are kept.
            pause = _pause(
                gap_ms(older, spurt), spurt.is_paragraph_start, paragraph_threshold_ms
            )
        entries.append(ListEntry(spurt=spurt, pause_after=pause))
    return ListProjection(
        mode=ViewMode.REVERSED,
        entries=tuple(entries),
        total_duration=total_duration(spurts),
    )


def _pause(gap: float, is_break: bool, paragraph_threshold_ms: float) -> Pause:
    return Pause(
        gap_ms=gap,
        is_paragraph_break=is_break,
        width_percent=100.0 if is_break else pause_width_percent(gap, paragraph_threshold_ms),
    )
