"""FastAPI application that exposes the stream registry to a local UI."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from .config import SegmentationSettings
from .engine import SpurtEngine
from .models import Spurt, StreamSummary
from .views import ListProjection, Pause, Projection, WallProjection

logger = logging.getLogger(__name__)


class InputPayload(BaseModel):
    text: str
    # Client clock, epoch milliseconds. The recorder keeps the spurt's
    # completion time in the same timebase as the keystrokes it reports.
    timestamp: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class RenamePayload(BaseModel):
    title: str

    model_config = ConfigDict(extra="forbid")


class SettingsPayload(BaseModel):
    cut_threshold_ms: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    paragraph_threshold_ms: Optional[float] = Field(
        default=None, gt=0, allow_inf_nan=False
    )

    model_config = ConfigDict(extra="forbid")


class NudgePayload(BaseModel):
    cut_steps: int = 0
    paragraph_steps: int = 0

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    settings: Optional[SegmentationSettings] = None,
    engine: Optional[SpurtEngine] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_engine = engine or SpurtEngine(settings or SegmentationSettings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        logger.info(
            "Dashboard ready: cut=%dms paragraph=%dms",
            resolved_engine.settings.cut_threshold_ms,
            resolved_engine.settings.paragraph_threshold_ms,
        )
        yield
        resolved_engine.shutdown()

    app = FastAPI(title="Spurt Stream", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.engine = resolved_engine

    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return request.app.state.engine.status()

    @app.get("/api/streams")
    def list_streams(request: Request) -> Dict[str, Any]:
        return _listing_payload(request.app.state.engine)

    @app.post("/api/streams")
    def create_stream(request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        stream_id = engine.registry.create_stream()
        payload = _listing_payload(engine)
        payload["created_id"] = stream_id
        return payload

    @app.patch("/api/streams/{stream_id}")
    def rename_stream(stream_id: str, payload: RenamePayload, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.rename_stream(stream_id, payload.title)
        return _listing_payload(engine)

    @app.delete("/api/streams/{stream_id}")
    def delete_stream(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.delete_stream(stream_id)
        return _listing_payload(engine)

    @app.post("/api/streams/{stream_id}/clear")
    def clear_stream(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.clear_stream(stream_id)
        return _listing_payload(engine)

    @app.post("/api/streams/{stream_id}/cycle-view")
    def cycle_view(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.cycle_view_mode(stream_id)
        return _listing_payload(engine)

    @app.post("/api/streams/{stream_id}/minimize")
    def toggle_minimize(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.toggle_minimize(stream_id)
        return _listing_payload(engine)

    @app.post("/api/streams/{stream_id}/activate")
    def activate(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.registry.set_active(stream_id)
        return _listing_payload(engine)

    @app.get("/api/streams/{stream_id}/view")
    def stream_view(stream_id: str, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        projection = engine.view(stream_id)
        if projection is None:
            raise HTTPException(status_code=404, detail="Stream not found")
        return {"stream_id": stream_id, **_projection_payload(projection)}

    @app.post("/api/input")
    def input_event(payload: InputPayload, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.handle_input(payload.text, payload.timestamp)
        return engine.status()

    @app.put("/api/settings")
    def update_settings(payload: SettingsPayload, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.update_settings(
            cut_ms=payload.cut_threshold_ms,
            paragraph_ms=payload.paragraph_threshold_ms,
        )
        return engine.status()

    @app.post("/api/settings/nudge")
    def nudge_settings(payload: NudgePayload, request: Request) -> Dict[str, Any]:
        engine: SpurtEngine = request.app.state.engine
        engine.nudge_settings(
            cut_steps=payload.cut_steps, paragraph_steps=payload.paragraph_steps
        )
        return engine.status()

    @app.get("/")
    def index(request: Request):
        index_path = (Path(__file__).parent / "static" / "index.html").resolve()
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="UI not found")
        return FileResponse(index_path)

    return app


def _listing_payload(engine: SpurtEngine) -> Dict[str, Any]:
    summaries = engine.registry.list_streams()
    return {
        "active_stream_id": engine.registry.active_stream_id,
        "streams": [_summary_payload(summary) for summary in summaries],
        "visible": [summary.id for summary in engine.registry.visible_streams()],
        "dock": [summary.id for summary in engine.registry.dock()],
    }


def _summary_payload(summary: StreamSummary) -> Dict[str, Any]:
    return {
        "id": summary.id,
        "title": summary.title,
        "view_mode": summary.view_mode.value,
        "minimized": summary.minimized,
        "spurt_count": summary.spurt_count,
        "total_duration": summary.total_duration,
        "is_active": summary.is_active,
    }


def _projection_payload(projection: Projection) -> Dict[str, Any]:
    if isinstance(projection, WallProjection):
        return {
            "view_mode": projection.mode.value,
            "total_duration": projection.total_duration,
            "tokens": [
                {
                    **_spurt_payload(token.spurt),
                    "paragraph_break_before": token.paragraph_break_before,
                }
                for token in projection.tokens
            ],
        }
    return _list_payload(projection)


def _list_payload(projection: ListProjection) -> Dict[str, Any]:
    return {
        "view_mode": projection.mode.value,
        "total_duration": projection.total_duration,
        "entries": [
            {
                **_spurt_payload(entry.spurt),
                "pause_after": _pause_payload(entry.pause_after),
            }
            for entry in projection.entries
        ],
    }


def _pause_payload(pause: Optional[Pause]) -> Optional[Dict[str, Any]]:
    if pause is None:
        return None
    return {
        "gap_seconds": pause.seconds,
        "is_paragraph_break": pause.is_paragraph_break,
        "width_percent": pause.width_percent,
        "show_label": pause.show_label,
    }


def _spurt_payload(spurt: Spurt) -> Dict[str, Any]:
    return {
        "id": spurt.id,
        "text": spurt.text,
        "created_at": spurt.created_at,
        "duration": spurt.duration,
        "is_paragraph_start": spurt.is_paragraph_start,
    }
