#!/usr/bin/env python3
"""LLM Chat — API server for the chat completion route.

Usage
-----
Copy `.env.example` to `.env` if you want to change the defaults, then run:

    python main.py

The server exposes ``POST /api/chat`` and relays each request to the
provider named in the request's ``config``.

Environment variables:
  API_HOST    Bind address            (default: 0.0.0.0)
  API_PORT    Port                    (default: 8000)
  LOG_LEVEL   Root log level          (default: INFO)
"""

import logging

import uvicorn

from src.api.app import app
from src.config import Config

logger = logging.getLogger(__name__)


def main() -> None:
    config = Config.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logger.info("Chat API listening on %s:%d", config.api_host, config.api_port)
    uvicorn.run(app, host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
