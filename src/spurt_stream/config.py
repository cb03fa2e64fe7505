"""Configuration models and helpers for spurt segmentation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta


MIN_CUT_THRESHOLD_MS = 250
MIN_PARAGRAPH_THRESHOLD_MS = 1000
# Keeps idle timers well inside threading.TIMEOUT_MAX and timedelta's range.
MAX_THRESHOLD_MS = 60 * 60 * 1000
THRESHOLD_STEP_MS = 250


@dataclass(slots=True)
class SegmentationSettings:
    """Process-wide idle thresholds shared by every stream.

    ``cut_threshold`` is the silence that finishes a spurt and
    ``paragraph_threshold`` the end-to-start silence that opens a paragraph.
    Values outside ``[floor, MAX_THRESHOLD_MS]`` are clamped rather than
    rejected; only non-finite values raise ``ValueError``.
    """

    cut_threshold: timedelta = timedelta(milliseconds=1500)
    paragraph_threshold: timedelta = timedelta(seconds=10)

    def __post_init__(self) -> None:
        self.cut_threshold = _clamp(_to_ms(self.cut_threshold), MIN_CUT_THRESHOLD_MS)
        self.paragraph_threshold = _clamp(
            _to_ms(self.paragraph_threshold), MIN_PARAGRAPH_THRESHOLD_MS
        )

    @classmethod
    def from_milliseconds(
        cls,
        cut_ms: float | None = None,
        paragraph_ms: float | None = None,
    ) -> "SegmentationSettings":
        settings = cls()
        settings.update(cut_ms=cut_ms, paragraph_ms=paragraph_ms)
        return settings

    @property
    def cut_threshold_ms(self) -> int:
        return _to_ms(self.cut_threshold)

    @property
    def paragraph_threshold_ms(self) -> int:
        return _to_ms(self.paragraph_threshold)

    def update(
        self, *, cut_ms: float | None = None, paragraph_ms: float | None = None
    ) -> None:
        cut = _clamp(cut_ms, MIN_CUT_THRESHOLD_MS) if cut_ms is not None else None
        paragraph = (
            _clamp(paragraph_ms, MIN_PARAGRAPH_THRESHOLD_MS)
            if paragraph_ms is not None
            else None
        )
        if cut is not None:
            self.cut_threshold = cut
        if paragraph is not None:
            self.paragraph_threshold = paragraph

    def nudge(self, *, cut_steps: int = 0, paragraph_steps: int = 0) -> None:
        """Move either threshold by whole ``THRESHOLD_STEP_MS`` increments."""
        self.update(
            cut_ms=self.cut_threshold_ms + cut_steps * THRESHOLD_STEP_MS,
            paragraph_ms=self.paragraph_threshold_ms
            + paragraph_steps * THRESHOLD_STEP_MS,
        )


def _clamp(value_ms: float, floor_ms: int) -> timedelta:
    if isinstance(value_ms, float) and not math.isfinite(value_ms):
        raise ValueError(f"threshold must be a finite number of milliseconds, got {value_ms}")
    return timedelta(milliseconds=min(max(value_ms, floor_ms), MAX_THRESHOLD_MS))


def _to_ms(value: timedelta) -> int:
    return int(round(value.total_seconds() * 1000))
