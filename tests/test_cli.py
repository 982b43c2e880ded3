import asyncio

from scripts import detect_url
from src.detector.engine import BrowserEngine

from conftest import FakePlaywright, PageScript

EMBED = "https://embed.example/v/3"
MASTER = "https://cdn.example/hls/master.m3u8"


def _use_engine(monkeypatch, pw):
    class Engine:
        @staticmethod
        async def start():
            return BrowserEngine(pw)

    monkeypatch.setattr(detect_url, "BrowserEngine", Engine)


def test_bad_timeout_reports_error(monkeypatch, capsys):
    pw = FakePlaywright()
    _use_engine(monkeypatch, pw)

    code = asyncio.run(detect_url.run(detect_url.parse_args([EMBED, "--timeout", "-1"])))
    assert code == 1
    assert capsys.readouterr().err.startswith("ERROR: timeout_ms")
    assert pw.stopped
    assert pw.chromium.browsers == []


def test_prints_result_json(monkeypatch, capsys):
    pw = FakePlaywright({EMBED: PageScript(on_load=[("response", MASTER)])})
    _use_engine(monkeypatch, pw)

    code = asyncio.run(detect_url.run(detect_url.parse_args([EMBED, "--wait", "0", "--no-click"])))
    assert code == 0
    assert MASTER in capsys.readouterr().out
