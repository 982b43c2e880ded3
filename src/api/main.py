from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask
from contextlib import asynccontextmanager
from typing import Optional
import asyncio
import logging
import os
import time
import httpx

from src.core.config import Settings
from src.detector.base import DetectionRequest
from src.detector.engine import BrowserEngine
from src.detector.errors import EngineUnavailable, SessionAcquisitionFailed
from src.detector.relay import StreamRelay, CORS_HEADERS
from src.detector.runner import StreamDetector

log = logging.getLogger("streamsniff.api")

STARTED_AT = time.monotonic()
settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = await BrowserEngine.start()
    app.state.engine = engine
    app.state.detector = StreamDetector(engine, max_sessions=settings.max_concurrent_sessions)
    yield
    await engine.stop()


app = FastAPI(title="StreamSniff | HLS Detector", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Replaced by lifespan; until then every detect call reports the engine as down
app.state.settings = settings
app.state.detector = StreamDetector(BrowserEngine.unavailable("Playwright not initialized"))
app.state.relay = StreamRelay(timeout=settings.proxy_timeout_s)


def error(status: int, message: str, **extra):
    return JSONResponse({**extra, "error": message}, status_code=status)


# --- 1. DETECTION ---

@app.get("/api/detect")
async def detect(request: Request, url: Optional[str] = None, timeout: int = 0, wait: int = 0,
                 click: bool = True, headless: bool = True):
    """
    Loads `url` in a headless browser and returns every .m3u8 URL it requested,
    master playlists first. `timeout` / `wait` are in ms; 0 means default.
    """
    if not url:
        return error(400, "Missing required parameter: url", succeeded=False)

    cfg: Settings = request.app.state.settings
    detector: StreamDetector = request.app.state.detector
    if not detector.available:
        return error(503, detector.engine.reason or "Playwright not available", succeeded=False)

    try:
        job = DetectionRequest(
            target_url=url,
            timeout_ms=timeout or cfg.detect_timeout_ms,
            settle_ms=wait or cfg.detect_settle_ms,
            attempt_playback_trigger=click,
            headless=headless,
        )
    except ValueError as e:
        return error(400, str(e), succeeded=False)

    try:
        result = await asyncio.wait_for(detector.detect(job), timeout=cfg.request_timeout_s)
    except EngineUnavailable as e:
        return error(503, str(e), succeeded=False)
    except SessionAcquisitionFailed as e:
        log.error(f"[detect] {e}")
        return error(500, str(e), succeeded=False)
    except asyncio.TimeoutError:
        log.warning(f"[detect] Gave up on {url} after {cfg.request_timeout_s}s")
        return error(504, f"Detection exceeded {cfg.request_timeout_s}s", succeeded=False)

    return result.to_dict()


# --- 2. PROXY ---

@app.get("/api/proxy")
@app.get("/proxy")
async def proxy_stream(request: Request, url: Optional[str] = None):
    if not url:
        return error(400, "Missing url parameter")

    relay: StreamRelay = request.app.state.relay
    try:
        upstream = await relay.open(url)
    except ValueError as e:
        return error(400, str(e))
    except httpx.HTTPError as e:
        log.warning(f"[proxy] Upstream failed for {url[:80]}: {e}")
        return error(502, str(e) or type(e).__name__)

    return StreamingResponse(
        upstream.aiter_bytes(),
        status_code=upstream.status_code,
        media_type=upstream.content_type,
        headers=CORS_HEADERS,
        background=BackgroundTask(upstream.close),
    )


# OPTIONS without Access-Control-Request-Method, which CORSMiddleware passes through
@app.options("/{path:path}")
async def options_any(path: str):
    return Response(status_code=204, headers={**CORS_HEADERS, "Access-Control-Allow-Methods": "GET, POST, OPTIONS"})


# --- 3. HEALTH ---

@app.get("/api/health")
async def health(request: Request):
    detector: StreamDetector = request.app.state.detector
    return {
        "status": "ok",
        "playwright": detector.available,
        "engine": None if detector.available else detector.engine.reason,
        "activeSessions": detector.active_sessions,
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }


# --- 4. WEB UI ---

@app.get("/")
@app.get("/index.html")
async def read_index(request: Request):
    path = request.app.state.settings.player_html
    if not os.path.isfile(path):
        return error(404, "Not found")
    return FileResponse(path, media_type="text/html")
