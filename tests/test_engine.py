import asyncio

import pytest

from src.detector import engine as engine_mod
from src.detector.engine import BrowserEngine
from src.detector.errors import EngineUnavailable

from conftest import FakePlaywright


class _Starter:
    def __init__(self, pw=None, error=None):
        self.pw = pw
        self.error = error

    async def start(self):
        if self.error:
            raise self.error
        return self.pw


def test_start_reports_missing_driver(monkeypatch):
    monkeypatch.setattr(engine_mod, "async_playwright", lambda: _Starter(error=RuntimeError("driver gone")))
    eng = asyncio.run(BrowserEngine.start())

    assert not eng.available
    assert "driver gone" in eng.reason
    with pytest.raises(EngineUnavailable):
        asyncio.run(eng.launch())


def test_start_reports_missing_chromium(monkeypatch):
    pw = FakePlaywright()
    pw.chromium.executable_path = "/nonexistent/chrome"
    monkeypatch.setattr(engine_mod, "async_playwright", lambda: _Starter(pw))
    eng = asyncio.run(BrowserEngine.start())

    assert not eng.available
    assert "Chromium not installed" in eng.reason
    assert pw.stopped


def test_start_ok(monkeypatch, tmp_path):
    exe = tmp_path / "chrome"
    exe.write_text("")
    pw = FakePlaywright()
    pw.chromium.executable_path = str(exe)
    monkeypatch.setattr(engine_mod, "async_playwright", lambda: _Starter(pw))

    eng = asyncio.run(BrowserEngine.start())
    assert eng.available and eng.reason is None

    browser = asyncio.run(eng.launch(headless=True))
    assert browser.headless is True

    asyncio.run(eng.stop())
    assert pw.stopped
    assert not eng.available
