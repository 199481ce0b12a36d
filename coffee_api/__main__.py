"""
Run the API locally.

Usage:
    python -m coffee_api
"""
from __future__ import annotations

import logging

import uvicorn

from .config import DEFAULT_SERVICE_CONFIG


def main() -> None:
    config = DEFAULT_SERVICE_CONFIG
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "coffee_api.app:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
