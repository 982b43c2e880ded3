"""
Detector engine — loads an embed page in a throwaway browser, pokes the
player, and returns every .m3u8 URL the page touched, master playlists first.

Usage:
    engine = await BrowserEngine.start()
    detector = StreamDetector(engine)
    result = await detector.detect(DetectionRequest("https://example.com/embed/1"))
    print(result.to_dict())
    await engine.stop()
"""
from __future__ import annotations
import asyncio
import logging
import time
from typing import Optional

from .base import DetectionRequest, DetectionResult, ObservedUrl
from .collector import UrlCollector
from .engine import BrowserEngine
from .errors import EngineUnavailable, NavigationDegraded
from .session import BrowserSession
from .triggers import PLAY_TRIGGERS, PlayTrigger, attempt_playback, click_video

log = logging.getLogger("streamsniff.detector")

DEFAULT_MAX_SESSIONS = 2


def rank_candidates(found: list[ObservedUrl]) -> list[ObservedUrl]:
    """Master playlists first; discovery order kept within each group."""
    # sorted() is stable, so equal keys keep their original order
    return sorted(found, key=lambda o: 0 if o.is_master else 1)


class StreamDetector:
    def __init__(self, engine: BrowserEngine, *, max_sessions: int = DEFAULT_MAX_SESSIONS,
                 triggers: list[PlayTrigger] = PLAY_TRIGGERS):
        self.engine = engine
        self.triggers = triggers
        self.max_sessions = max(1, max_sessions)
        self._admission = asyncio.Semaphore(self.max_sessions)
        self.active_sessions = 0

    @property
    def available(self) -> bool:
        return self.engine.available

    async def detect_url(self, url: str, **options) -> DetectionResult:
        return await self.detect(DetectionRequest(target_url=url, **options))

    async def detect(self, request: DetectionRequest) -> DetectionResult:
        if not self.engine.available:
            raise EngineUnavailable(self.engine.reason or "Playwright not initialized")

        async with self._admission:
            self.active_sessions += 1
            try:
                return await self._run(request)
            finally:
                self.active_sessions -= 1

    async def _run(self, request: DetectionRequest) -> DetectionResult:
        started = time.monotonic()
        collector = UrlCollector(started_at=started)
        trigger: Optional[PlayTrigger] = None
        nav_error: Optional[str] = None

        async with BrowserSession(self.engine, headless=request.headless) as session:
            session.subscribe(collector)

            log.info(f"[detect] Loading: {request.target_url}")
            try:
                await session.navigate(request.target_url, timeout_ms=request.timeout_ms)
            except NavigationDegraded as e:
                nav_error = str(e)
                log.warning(f"  [!] Navigation degraded: {nav_error}")

            if request.attempt_playback_trigger:
                trigger = await attempt_playback(session, self.triggers)

            await session.wait(request.settle_ms)

            if len(collector) == 0:
                await click_video(session)

        candidates = rank_candidates(collector.snapshot())
        elapsed_ms = int((time.monotonic() - started) * 1000)
        log.info(f"[detect] Done: {len(candidates)} candidate(s) in {elapsed_ms}ms")
        return DetectionResult(
            candidates=candidates,
            elapsed_ms=elapsed_ms,
            trigger=trigger.selector if trigger else None,
            navigation_error=nav_error,
        )
