"""
Process entry point: configure logging and serve the API.

    python -m src.main
"""
import logging

import uvicorn

from src.api.main import app, settings


def main():
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("streamsniff")
    log.info(f"Video Stream Detector API on http://{settings.host}:{settings.port}")
    log.info("  GET /api/detect?url=<embed_url>  - Detect m3u8 URLs")
    log.info("  GET /api/proxy?url=<stream_url>  - Proxy HLS stream")
    log.info("  GET /api/health                  - Health check")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
