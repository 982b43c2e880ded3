"""
One disposable browser + context + page, scoped to a single detection run.

    async with BrowserSession(engine, headless=True) as session:
        session.subscribe(collector)
        await session.navigate(url, timeout_ms=15000)

Leaving the block closes everything, whether the body returned, raised, or
the task was cancelled.
"""
from __future__ import annotations
import asyncio
import logging

from playwright.async_api import Error as PlaywrightError

from .errors import (
    EngineUnavailable, SessionAcquisitionFailed, NavigationDegraded, InteractionSkipped,
)

log = logging.getLogger("streamsniff.session")

DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class BrowserSession:
    def __init__(self, engine, *, headless: bool = True, user_agent: str = DEFAULT_UA):
        self.engine = engine
        self.headless = headless
        self.user_agent = user_agent
        self.browser = None
        self.context = None
        self.page = None

    async def __aenter__(self) -> "BrowserSession":
        try:
            self.browser = await self.engine.launch(headless=self.headless)
            self.context = await self.browser.new_context(user_agent=self.user_agent)
            self.page = await self.context.new_page()
        except EngineUnavailable:
            await self.close()
            raise
        except Exception as e:
            await self.close()
            raise SessionAcquisitionFailed(f"Browser session could not be created: {e}") from e
        except BaseException:
            # Cancelled mid-launch; __aexit__ won't run for us
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False

    async def close(self):
        # Context first so the page's network stops before the process goes
        for name in ("context", "browser"):
            handle = getattr(self, name)
            if handle is None:
                continue
            setattr(self, name, None)
            try:
                await handle.close()
            except Exception as e:
                log.warning(f"[session] Closing {name} failed: {e}")
        self.page = None

    # ── observation ──────────────────

    def subscribe(self, collector) -> None:
        """Attach request/response listeners. Must happen before navigate()."""
        self.page.on("request", collector.on_request)
        self.page.on("response", collector.on_response)

    # ── steps ──────────────────

    async def navigate(self, url: str, *, timeout_ms: int) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightError as e:
            raise NavigationDegraded(str(e).splitlines()[0] if str(e) else "navigation failed") from e

    async def click(self, selector: str, *, timeout_ms: int = 1000) -> None:
        try:
            await self.page.click(selector, timeout=timeout_ms)
        except PlaywrightError as e:
            raise InteractionSkipped(selector, str(e).splitlines()[0] if str(e) else "") from e

    async def wait(self, ms: int) -> None:
        if ms > 0:
            await asyncio.sleep(ms / 1000)
