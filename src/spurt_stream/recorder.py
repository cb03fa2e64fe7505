"""Spurt recorder: turns raw text changes into finished bursts of typing."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .config import SegmentationSettings
from .models import InputEvent, SpurtCandidate

logger = logging.getLogger(__name__)

MIN_SPURT_DURATION = 0.1


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]
Clock = Callable[[], int]
SpurtCallback = Callable[[SpurtCandidate], None]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def daemon_timer(interval: float, function: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


@dataclass(slots=True)
class RecorderState:
    text: str = ""
    start_time: Optional[int] = None
    last_keystroke: Optional[int] = None
    # Event timestamps minus the recorder clock at the latest keystroke.
    clock_offset: int = 0
    generation: int = 0


class SpurtRecorder:
    """Buffers typing and emits a spurt after ``cut_threshold`` of silence.

    At most one idle timer is outstanding. Every change event cancels it and
    schedules a new one; a timer that was superseded but still fires is
    recognised by its generation number and ignored.
    """

    def __init__(
        self,
        settings: SegmentationSettings,
        on_spurt: SpurtCallback,
        *,
        clock: Clock = wall_clock_ms,
        timer_factory: TimerFactory = daemon_timer,
    ) -> None:
        self.settings = settings
        self._on_spurt = on_spurt
        self._clock = clock
        self._timer_factory = timer_factory
        self._state = RecorderState()
        self._timer: Optional[TimerHandle] = None
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._state.text

    @property
    def is_recording(self) -> bool:
        with self._lock:
            return bool(self._state.text)

    def handle_event(self, event: InputEvent) -> None:
        self.handle_input(event.text, event.timestamp)

    def handle_input(self, text: str, timestamp: Optional[int] = None) -> None:
        """Apply a content change.

        ``timestamp`` may come from another clock (a browser, a log file).
        The completion time of the resulting spurt is reported in that same
        timebase so it stays comparable with the keystroke times.
        """
        clock_now = self._clock()
        now = clock_now if timestamp is None else timestamp
        with self._lock:
            state = self._state
            was_empty = not state.text
            state.text = text
            state.last_keystroke = now
            state.clock_offset = now - clock_now
            if was_empty and len(text) == 1:
                state.start_time = now
            if state.start_time is None:
                # Paste or programmatic input skipped the single-character step.
                state.start_time = now
            self._reschedule_locked()

    def flush(self) -> Optional[SpurtCandidate]:
        """Finish the in-progress burst immediately instead of waiting."""
        with self._lock:
            self._cancel_locked()
            candidate = self._finish_locked()
        if candidate is not None:
            self._emit(candidate)
        return candidate

    def close(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _reschedule_locked(self) -> None:
        self._cancel_locked()
        generation = self._state.generation
        interval = self.settings.cut_threshold.total_seconds()
        timer = self._timer_factory(interval, lambda: self._on_timeout(generation))
        self._timer = timer
        timer.start()

    def _cancel_locked(self) -> None:
        self._state.generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timeout(self, generation: int) -> None:
        with self._lock:
            if generation != self._state.generation:
                logger.debug("Ignoring superseded idle timer.")
                return
            self._timer = None
            candidate = self._finish_locked()
        if candidate is None:
            return
        try:
            self._emit(candidate)
        except Exception:
            # Runs on the timer thread; there is no caller to propagate to.
            logger.exception("Spurt consumer failed; dropping spurt.")

    def _finish_locked(self) -> Optional[SpurtCandidate]:
        state = self._state
        text = state.text.strip()
        start_time = state.start_time
        last_keystroke = state.last_keystroke
        clock_offset = state.clock_offset
        state.text = ""
        state.start_time = None
        state.last_keystroke = None
        state.clock_offset = 0
        if not text:
            return None

        duration = 0.0
        if start_time is not None and last_keystroke is not None:
            duration = (last_keystroke - start_time) / 1000
        return SpurtCandidate(
            text=text,
            created_at=self._clock() + clock_offset,
            duration=duration if duration > 0 else MIN_SPURT_DURATION,
        )

    def _emit(self, candidate: SpurtCandidate) -> None:
        logger.debug(
            "Spurt finished: %d chars over %.2fs", len(candidate.text), candidate.duration
        )
        self._on_spurt(candidate)
