"""
One-shot detection from the command line, without the API.

    python scripts/detect_url.py https://example.com/embed/123 --wait 8000
"""
import argparse
import asyncio
import json
import logging
import os
import sys

# Ensure we can import from src (add root to path)
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from src.detector.base import DEFAULT_TIMEOUT_MS, DEFAULT_SETTLE_MS
from src.detector.engine import BrowserEngine
from src.detector.errors import DetectorError
from src.detector.runner import StreamDetector


async def run(opts) -> int:
    engine = await BrowserEngine.start()
    try:
        detector = StreamDetector(engine, max_sessions=1)
        result = await detector.detect_url(
            opts.url,
            timeout_ms=opts.timeout,
            settle_ms=opts.wait,
            attempt_playback_trigger=not opts.no_click,
            headless=not opts.headed,
        )
    except (DetectorError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.stop()

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.succeeded else 1


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Detect HLS .m3u8 URLs behind an embed page")
    ap.add_argument("url", help="Embed page URL")
    ap.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_MS, help="Navigation timeout (ms)")
    ap.add_argument("--wait", type=int, default=DEFAULT_SETTLE_MS, help="Settle window after load (ms)")
    ap.add_argument("--no-click", action="store_true", help="Don't try to press play")
    ap.add_argument("--headed", action="store_true", help="Show the browser (local debugging)")
    ap.add_argument("--debug", action="store_true", help="Verbose logs")
    return ap.parse_args(argv)


if __name__ == "__main__":
    opts = parse_args()
    logging.basicConfig(level=logging.DEBUG if opts.debug else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(run(opts)))
