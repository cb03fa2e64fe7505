"""Helpers to launch the local web dashboard."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import SegmentationSettings
from .webapp import create_app

logger = logging.getLogger(__name__)

STATIC_INDEX = Path(__file__).parent / "static" / "index.html"


def dashboard_url(host: str, port: int, static_index: Path = STATIC_INDEX) -> str:
    """URL worth opening: the bundled UI if present, otherwise the API docs."""
    base = f"http://{host}:{port}"
    return f"{base}/" if static_index.exists() else f"{base}/docs"


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    settings: Optional[SegmentationSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the stream API; keystrokes arrive via ``POST /api/input``."""
    resolved_settings = settings or SegmentationSettings()
    app = create_app(settings=resolved_settings)
    logger.info(
        "Recording streams on %s:%d (cut=%dms paragraph=%dms)",
        host,
        port,
        resolved_settings.cut_threshold_ms,
        resolved_settings.paragraph_threshold_ms,
    )

    if open_browser:
        threading.Thread(
            target=_launch_browser_after_delay,
            args=(dashboard_url(host, port),),
            daemon=True,
        ).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _launch_browser_after_delay(url: str) -> None:
    time.sleep(1.0)
    try:
        webbrowser.open(url)
    except Exception:
        logger.exception("Failed to launch browser for %s", url)
