"""
Stand-ins for the Playwright objects the detector drives.

FakePlaywright → FakeChromium.launch() → FakeBrowser.new_context() →
FakeContext.new_page() → FakePage. Each target URL gets a PageScript that
says which .m3u8 traffic the page emits on load and on which clicks.
"""
import asyncio
from dataclasses import dataclass, field

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from src.detector.engine import BrowserEngine


@dataclass
class PageScript:
    on_load: list = field(default_factory=list)       # [("request"|"response", url)]
    clickable: dict = field(default_factory=dict)     # selector -> [(kind, url)]
    goto_error: str | None = None                    # raised as a Playwright timeout
    goto_raises: Exception | None = None             # raised as-is


@dataclass
class FakeEvent:
    url: str


class FakePage:
    def __init__(self, scripts):
        self.scripts = scripts
        self.script = PageScript()
        self.listeners = {"request": [], "response": []}
        self.clicks = []
        self.goto_calls = []

    def on(self, event, callback):
        self.listeners[event].append(callback)

    async def emit(self, events):
        for kind, url in events:
            for cb in self.listeners[kind]:
                cb(FakeEvent(url))
            await asyncio.sleep(0)

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        self.script = self.scripts.get(url, PageScript())
        await self.emit(self.script.on_load)
        if self.script.goto_raises:
            raise self.script.goto_raises
        if self.script.goto_error:
            raise PlaywrightTimeout(self.script.goto_error)

    async def click(self, selector, timeout=None):
        self.clicks.append((selector, timeout))
        if selector not in self.script.clickable:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded.\nwaiting for {selector}")
        await self.emit(self.script.clickable[selector])


class FakeContext:
    def __init__(self, browser, fail_new_page=False):
        self.browser = browser
        self.fail_new_page = fail_new_page
        self.closed = False
        self.page = None

    async def new_page(self):
        if self.fail_new_page:
            raise RuntimeError("page crashed")
        self.page = FakePage(self.browser.scripts)
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, scripts, headless, fail_new_page=False, context_delay=0):
        self.scripts = scripts
        self.headless = headless
        self.fail_new_page = fail_new_page
        self.context_delay = context_delay
        self.closed = False
        self.contexts = []

    async def new_context(self, user_agent=None):
        if self.context_delay:
            await asyncio.sleep(self.context_delay)
        ctx = FakeContext(self, fail_new_page=self.fail_new_page)
        ctx.user_agent = user_agent
        self.contexts.append(ctx)
        return ctx

    async def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, scripts, launch_error=None, fail_new_page=False, context_delay=0):
        self.scripts = scripts
        self.launch_error = launch_error
        self.fail_new_page = fail_new_page
        self.context_delay = context_delay
        self.browsers = []

    async def launch(self, headless=True, args=None):
        if self.launch_error:
            raise self.launch_error
        browser = FakeBrowser(self.scripts, headless, fail_new_page=self.fail_new_page,
                              context_delay=self.context_delay)
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self, scripts=None, **kwargs):
        self.chromium = FakeChromium(scripts if scripts is not None else {}, **kwargs)
        self.stopped = False

    async def stop(self):
        self.stopped = True


@pytest.fixture
def scripts():
    return {}


@pytest.fixture
def playwright(scripts):
    return FakePlaywright(scripts)


@pytest.fixture
def engine(playwright):
    return BrowserEngine(playwright)
