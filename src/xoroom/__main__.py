"""Entry point for running the room server via ``python -m xoroom``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered room server."""

    host = os.environ.get("XOROOM_HOST", "0.0.0.0")
    port = int(os.environ.get("XOROOM_PORT", "3001"))
    log_level = os.environ.get("XOROOM_LOG_LEVEL", "info").lower()
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("xoroom.server:app", host=host, port=port, log_level=log_level, reload=False)


if __name__ == "__main__":
    main()
