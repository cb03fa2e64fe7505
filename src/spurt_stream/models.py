"""Domain models for segmented typing streams."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


DEFAULT_STREAM_TITLE = "New Stream"
UNTITLED_PLACEHOLDER = "Untitled"


class ViewMode(str, Enum):
    WALL = "wall"
    ORDERED = "ordered"
    REVERSED = "reversed"

    def next(self) -> "ViewMode":
        ring = list(ViewMode)
        return ring[(ring.index(self) + 1) % len(ring)]

    @property
    def label(self) -> str:
        return {
            ViewMode.WALL: "Wall View",
            ViewMode.ORDERED: "Ordered",
            ViewMode.REVERSED: "Reversed",
        }[self]


@dataclass(slots=True, frozen=True)
class InputEvent:
    """A raw content change: the full current text and when it happened."""

    text: str
    timestamp: int


@dataclass(slots=True, frozen=True)
class SpurtCandidate:
    """A finished burst of typing that has not been placed in a stream yet."""

    text: str
    created_at: int
    duration: float


@dataclass(slots=True, frozen=True)
class Spurt:
    """One completed, timestamped burst of continuous typing.

    ``created_at`` marks completion in epoch milliseconds, while ``duration``
    counts seconds from the first to the last keystroke of the burst.
    """

    id: str
    text: str
    created_at: int
    duration: float
    is_paragraph_start: bool

    @property
    def end_time(self) -> float:
        return self.created_at + self.duration * 1000


@dataclass(slots=True)
class Stream:
    """An independent recording session with its own display settings."""

    id: str
    title: str = DEFAULT_STREAM_TITLE
    spurts: tuple[Spurt, ...] = field(default_factory=tuple)
    view_mode: ViewMode = ViewMode.WALL
    minimized: bool = False

    @property
    def last_spurt(self) -> Optional[Spurt]:
        return self.spurts[-1] if self.spurts else None

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED_PLACEHOLDER


@dataclass(slots=True, frozen=True)
class StreamSummary:
    id: str
    title: str
    view_mode: ViewMode
    minimized: bool
    spurt_count: int
    total_duration: float
    is_active: bool
