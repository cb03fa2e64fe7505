"""Wiring between the recorder, the registry and the shared thresholds."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .config import SegmentationSettings
from .models import InputEvent, Spurt, SpurtCandidate
from .recorder import Clock, SpurtRecorder, TimerFactory, daemon_timer, wall_clock_ms
from .registry import StreamRegistry
from .views import Projection, project

logger = logging.getLogger(__name__)


class SpurtEngine:
    """Feeds keystrokes to a recorder and files finished spurts in the registry.

    A burst is filed under whichever stream is active when it completes.
    """

    def __init__(
        self,
        settings: Optional[SegmentationSettings] = None,
        *,
        clock: Clock = wall_clock_ms,
        timer_factory: TimerFactory = daemon_timer,
        registry: Optional[StreamRegistry] = None,
    ) -> None:
        self.settings = settings or SegmentationSettings()
        self.registry = registry or StreamRegistry(self.settings)
        self.registry.settings = self.settings
        self.recorder = SpurtRecorder(
            self.settings,
            self._file_spurt,
            clock=clock,
            timer_factory=timer_factory,
        )
        self.last_spurt: Optional[Spurt] = None

    def handle_input(self, text: str, timestamp: Optional[int] = None) -> None:
        self.recorder.handle_input(text, timestamp)

    def handle_event(self, event: InputEvent) -> None:
        self.recorder.handle_event(event)

    def update_settings(
        self, *, cut_ms: Optional[float] = None, paragraph_ms: Optional[float] = None
    ) -> None:
        self.settings.update(cut_ms=cut_ms, paragraph_ms=paragraph_ms)
        logger.info(
            "Thresholds now cut=%dms paragraph=%dms",
            self.settings.cut_threshold_ms,
            self.settings.paragraph_threshold_ms,
        )

    def nudge_settings(self, *, cut_steps: int = 0, paragraph_steps: int = 0) -> None:
        self.settings.nudge(cut_steps=cut_steps, paragraph_steps=paragraph_steps)

    def view(self, stream_id: str) -> Optional[Projection]:
        stream = self.registry.get_stream(stream_id)
        if stream is None:
            return None
        return project(stream, self.settings.paragraph_threshold_ms)

    def status(self) -> Dict[str, Any]:
        return {
            "recording": self.recorder.is_recording,
            "active_stream_id": self.registry.active_stream_id,
            "cut_threshold_ms": self.settings.cut_threshold_ms,
            "paragraph_threshold_ms": self.settings.paragraph_threshold_ms,
            "stream_count": len(self.registry),
            "last_spurt_id": self.last_spurt.id if self.last_spurt is not None else None,
        }

    def shutdown(self) -> None:
        try:
            self.recorder.flush()
        finally:
            self.recorder.close()
            logger.info("Engine stopped.")

    def _file_spurt(self, candidate: SpurtCandidate) -> None:
        spurt = self.registry.append_spurt(candidate)
        if spurt is not None:
            self.last_spurt = spurt
