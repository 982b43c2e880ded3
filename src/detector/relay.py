"""
Byte relay for detected streams.

Players on another origin cannot fetch most CDN playlists directly, so the
API re-serves them. Each call opens its own httpx client; nothing is shared
between relays and nothing here depends on the detector.
"""
from __future__ import annotations
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from .session import DEFAULT_UA

log = logging.getLogger("streamsniff.relay")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}


def target_origin(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.hostname:
        raise ValueError("Only absolute https:// URLs can be proxied")
    return f"{parsed.scheme}://{parsed.netloc}"


def upstream_headers(url: str) -> dict[str, str]:
    origin = target_origin(url)
    return {
        "User-Agent": DEFAULT_UA,
        "Accept": "*/*",
        "Accept-Encoding": "identity",
        "Referer": origin + "/",
        "Origin": origin,
    }


class UpstreamStream:
    """An open upstream response. `close()` must be awaited once the body is sent."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def content_type(self) -> Optional[str]:
        return self.response.headers.get("content-type")

    def aiter_bytes(self):
        return self.response.aiter_bytes()

    async def close(self):
        try:
            await self.response.aclose()
        finally:
            await self._client.aclose()


class StreamRelay:
    def __init__(self, *, timeout: float = 30, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self.transport = transport

    async def open(self, url: str) -> UpstreamStream:
        headers = upstream_headers(url)
        client = httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport,
        )
        try:
            req = client.build_request("GET", url, headers=headers)
            resp = await client.send(req, stream=True)
        except Exception:
            await client.aclose()
            raise
        log.info(f"[relay] {resp.status_code} {url[:80]}")
        return UpstreamStream(client, resp)
