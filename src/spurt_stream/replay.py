"""Deterministic segmentation of recorded keystroke logs.

A :class:`VirtualClock` stands in for both the wall clock and the timer
factory of a :class:`~spurt_stream.recorder.SpurtRecorder`, so a log of
timestamped input events produces exactly the spurts a live session with the
same timing would have produced.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from .config import SegmentationSettings
from .engine import SpurtEngine
from .models import InputEvent

logger = logging.getLogger(__name__)


class VirtualTimer:
    def __init__(self, clock: "VirtualClock", interval: float, function: Callable[[], None]) -> None:
        self.clock = clock
        self.due_ms = clock.now_ms + round(interval * 1000)
        self.function = function
        self.cancelled = False

    def start(self) -> None:
        self.clock._pending.append(self)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Manually advanced millisecond clock that also schedules timers."""

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms
        self._pending: list[VirtualTimer] = []

    def __call__(self) -> int:
        return self.now_ms

    def timer(self, interval: float, function: Callable[[], None]) -> VirtualTimer:
        return VirtualTimer(self, interval, function)

    @property
    def pending(self) -> list[VirtualTimer]:
        return [timer for timer in self._pending if not timer.cancelled]

    def advance_to(self, target_ms: int) -> None:
        """Fire every timer due at or before ``target_ms``, in due order."""
        while True:
            due = [timer for timer in self.pending if timer.due_ms <= target_ms]
            if not due:
                break
            timer = min(due, key=lambda item: item.due_ms)
            self._pending.remove(timer)
            self.now_ms = max(self.now_ms, timer.due_ms)
            timer.function()
        self._pending = self.pending
        self.now_ms = max(self.now_ms, target_ms)

    def run_pending(self) -> None:
        while self.pending:
            self.advance_to(max(timer.due_ms for timer in self.pending))


def replay_events(
    events: Iterable[InputEvent],
    settings: Optional[SegmentationSettings] = None,
) -> SpurtEngine:
    """Run ``events`` through a fresh engine on virtual time.

    Events are applied in the order given; the burst still open after the
    last event is finished when its idle timer would have fired.
    """
    clock = VirtualClock()
    engine = SpurtEngine(settings, clock=clock, timer_factory=clock.timer)
    count = 0
    for event in events:
        clock.advance_to(event.timestamp)
        engine.handle_event(event)
        count += 1
    clock.run_pending()
    logger.debug("Replayed %d input events", count)
    return engine


def load_events(path: Path) -> list[InputEvent]:
    with Path(path).open(encoding="utf-8") as handle:
        return list(parse_events(handle))


def parse_events(lines: Iterable[str]) -> Iterator[InputEvent]:
    """Parse JSON Lines of ``{"text": ..., "timestamp": ...}`` objects."""
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
            yield InputEvent(text=str(record["text"]), timestamp=int(record["timestamp"]))
        except (ValueError, KeyError, TypeError, OverflowError):
            logger.warning("Skipping malformed input event on line %d", number)
