"""Runtime settings, read from the environment (and a local .env if present)."""
from __future__ import annotations
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.detector.base import DEFAULT_TIMEOUT_MS, DEFAULT_SETTLE_MS

load_dotenv()

DEFAULT_PLAYER_HTML = os.path.join(os.path.dirname(__file__), "..", "static", "player.html")


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3333
    detect_timeout_ms: int = DEFAULT_TIMEOUT_MS
    detect_settle_ms: int = DEFAULT_SETTLE_MS
    max_concurrent_sessions: int = 2
    request_timeout_s: int = 60       # whole /api/detect call, browser included
    proxy_timeout_s: int = 30
    player_html: str = DEFAULT_PLAYER_HTML
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", cls.host),
            port=_int("PORT", cls.port),
            detect_timeout_ms=_int("DETECT_TIMEOUT_MS", cls.detect_timeout_ms),
            detect_settle_ms=_int("DETECT_SETTLE_MS", cls.detect_settle_ms),
            max_concurrent_sessions=_int("MAX_CONCURRENT_SESSIONS", cls.max_concurrent_sessions),
            request_timeout_s=_int("REQUEST_TIMEOUT_S", cls.request_timeout_s),
            proxy_timeout_s=_int("PROXY_TIMEOUT_S", cls.proxy_timeout_s),
            player_html=os.getenv("PLAYER_HTML", DEFAULT_PLAYER_HTML),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
