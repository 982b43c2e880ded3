"""
Process-wide browser automation handle.

Started once at startup and injected into StreamDetector. When Playwright or
its Chromium build is missing, start() hands back an "unavailable" engine
instead of raising, so the API can report the feature as disabled.

Usage:
    engine = await BrowserEngine.start()
    if engine.available:
        browser = await engine.launch(headless=True)
    await engine.stop()
"""
from __future__ import annotations
import logging
import os
from typing import Optional

from playwright.async_api import async_playwright

from .errors import EngineUnavailable

log = logging.getLogger("streamsniff.engine")

LAUNCH_ARGS = [
    "--autoplay-policy=no-user-gesture-required",
    "--disable-dev-shm-usage",
]

SETUP_HINT = "Run: playwright install chromium"


class BrowserEngine:
    def __init__(self, playwright=None, *, reason: Optional[str] = None):
        self._playwright = playwright
        self.reason = reason if playwright is None else None

    @classmethod
    def unavailable(cls, reason: str) -> "BrowserEngine":
        return cls(None, reason=reason)

    @classmethod
    async def start(cls) -> "BrowserEngine":
        try:
            pw = await async_playwright().start()
        except Exception as e:
            log.error(f"✗ Playwright failed to start: {e}")
            return cls.unavailable(f"Playwright not available ({e}). {SETUP_HINT}")

        executable = pw.chromium.executable_path
        if not executable or not os.path.exists(executable):
            await pw.stop()
            log.error(f"✗ Chromium not installed at {executable!r}")
            return cls.unavailable(f"Chromium not installed. {SETUP_HINT}")

        log.info("✓ Playwright loaded")
        return cls(pw)

    @property
    def available(self) -> bool:
        return self._playwright is not None

    async def launch(self, *, headless: bool = True):
        if not self.available:
            raise EngineUnavailable(self.reason or "Playwright not initialized")
        return await self._playwright.chromium.launch(headless=headless, args=LAUNCH_ARGS)

    async def stop(self):
        if self._playwright is not None:
            pw, self._playwright = self._playwright, None
            self.reason = "engine stopped"
            await pw.stop()
