"""Registry of independent spurt streams and the active routing target."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from typing import Callable, Optional

from .classifier import is_paragraph_start
from .config import SegmentationSettings
from .models import (
    DEFAULT_STREAM_TITLE,
    Spurt,
    SpurtCandidate,
    Stream,
    StreamSummary,
)
from .views import total_duration

logger = logging.getLogger(__name__)

INITIAL_STREAM_TITLE = "Stream Alpha"


def _new_id() -> str:
    return str(uuid.uuid4())


class StreamRegistry:
    """Owns every stream and routes finished spurts to the active one.

    Commands that name an unknown stream, or that would delete the last
    remaining stream, are ignored. Nothing here raises to the caller. All
    mutations go through a single lock; readers get copies whose spurt
    sequences are immutable tuples.
    """

    def __init__(
        self,
        settings: Optional[SegmentationSettings] = None,
        *,
        initial_title: str = INITIAL_STREAM_TITLE,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.settings = settings or SegmentationSettings()
        self._id_factory = id_factory
        self._streams: dict[str, Stream] = {}
        self._lock = threading.RLock()
        first = Stream(id=self._id_factory(), title=initial_title)
        self._streams[first.id] = first
        self._active_id = first.id

    @property
    def active_stream_id(self) -> str:
        with self._lock:
            return self._active_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._streams)

    def __contains__(self, stream_id: object) -> bool:
        with self._lock:
            return stream_id in self._streams

    def append_spurt(self, candidate: SpurtCandidate) -> Optional[Spurt]:
        with self._lock:
            stream = self._streams.get(self._active_id)
            if stream is None:
                logger.warning("No active stream; dropping spurt.")
                return None
            spurt = Spurt(
                id=self._id_factory(),
                text=candidate.text,
                created_at=candidate.created_at,
                duration=candidate.duration,
                is_paragraph_start=is_paragraph_start(
                    candidate,
                    stream.last_spurt,
                    self.settings.paragraph_threshold_ms,
                ),
            )
            stream.spurts = stream.spurts + (spurt,)
            logger.debug(
                "Appended spurt %s to stream %s (paragraph_start=%s)",
                spurt.id,
                stream.id,
                spurt.is_paragraph_start,
            )
            return spurt

    def create_stream(self, title: str = DEFAULT_STREAM_TITLE) -> str:
        with self._lock:
            stream = Stream(id=self._id_factory(), title=title)
            self._streams[stream.id] = stream
            self._active_id = stream.id
            logger.info("Created stream %s", stream.id)
            return stream.id

    def rename_stream(self, stream_id: str, title: str) -> None:
        with self._lock:
            stream = self._lookup(stream_id)
            if stream is not None:
                stream.title = title

    def clear_stream(self, stream_id: str) -> None:
        with self._lock:
            stream = self._lookup(stream_id)
            if stream is not None:
                stream.spurts = ()

    def delete_stream(self, stream_id: str) -> None:
        with self._lock:
            if self._lookup(stream_id) is None:
                return
            if len(self._streams) <= 1:
                logger.debug("Refusing to delete the last stream %s", stream_id)
                return
            del self._streams[stream_id]
            if self._active_id == stream_id:
                self._active_id = next(iter(self._streams))
            logger.info("Deleted stream %s; active is %s", stream_id, self._active_id)

    def cycle_view_mode(self, stream_id: str) -> None:
        with self._lock:
            stream = self._lookup(stream_id)
            if stream is not None:
                stream.view_mode = stream.view_mode.next()

    def toggle_minimize(self, stream_id: str) -> None:
        with self._lock:
            stream = self._lookup(stream_id)
            if stream is not None:
                stream.minimized = not stream.minimized

    def set_active(self, stream_id: str) -> None:
        with self._lock:
            if self._lookup(stream_id) is not None:
                self._active_id = stream_id

    def get_stream(self, stream_id: str) -> Optional[Stream]:
        """Return a detached copy of a stream, or ``None`` if it is unknown."""
        with self._lock:
            stream = self._streams.get(stream_id)
            return replace(stream) if stream is not None else None

    def list_streams(self) -> list[StreamSummary]:
        with self._lock:
            return [self._summarize(stream) for stream in self._streams.values()]

    def visible_streams(self) -> list[StreamSummary]:
        return [summary for summary in self.list_streams() if not summary.minimized]

    def dock(self) -> list[StreamSummary]:
        """Minimized streams, which stay eligible to receive input."""
        return [summary for summary in self.list_streams() if summary.minimized]

    def _lookup(self, stream_id: str) -> Optional[Stream]:
        stream = self._streams.get(stream_id)
        if stream is None:
            logger.debug("Ignoring command for unknown stream %s", stream_id)
        return stream

    def _summarize(self, stream: Stream) -> StreamSummary:
        return StreamSummary(
            id=stream.id,
            title=stream.title,
            view_mode=stream.view_mode,
            minimized=stream.minimized,
            spurt_count=len(stream.spurts),
            total_duration=total_duration(stream.spurts),
            is_active=stream.id == self._active_id,
        )
