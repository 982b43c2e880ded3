"""
Append-only collector for .m3u8 URLs seen on a page.

One collector per detection run. Playwright dispatches page events on the
event loop thread, so observe() never runs concurrently with itself.
"""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from .base import ObservedUrl, SOURCE_REQUEST, SOURCE_RESPONSE

log = logging.getLogger("streamsniff.detector")

MATCH = ".m3u8"


def matches(url: str) -> bool:
    return MATCH in url


class UrlCollector:
    def __init__(self, *, started_at: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.started_at = started_at if started_at is not None else clock()
        self._found: list[ObservedUrl] = []
        self._seen: set[str] = set()

    def elapsed_ms(self) -> int:
        return max(0, int((self._clock() - self.started_at) * 1000))

    def observe(self, url: str, source: str) -> bool:
        """Record `url` if it matches and is new. Returns True when recorded."""
        if not url or not matches(url) or url in self._seen:
            return False
        self._seen.add(url)
        self._found.append(ObservedUrl(url=url, source=source, offset_ms=self.elapsed_ms()))
        log.info(f"  [+] Found ({source}): {url[:80]}")
        return True

    # ── page event listeners ──────────────────

    def on_request(self, request) -> None:
        self.observe(request.url, SOURCE_REQUEST)

    def on_response(self, response) -> None:
        self.observe(response.url, SOURCE_RESPONSE)

    # ── views ──────────────────

    def __len__(self) -> int:
        return len(self._found)

    def snapshot(self) -> list[ObservedUrl]:
        return list(self._found)
