#!/usr/bin/env python3
"""Entry point for running the todo backend under uvicorn."""

import logging
import sys

import uvicorn

from .errors import FatalStartupError
from .logging_utils import configure_logging
from .settings import get_settings, load_database_url

logger = logging.getLogger(__name__)


def log_startup(host: str, port: int) -> None:
    """Log a single startup line for process managers."""
    settings = get_settings()
    logger.info(
        "Starting on %s:%s (POOL=%s-%s, LOG_LEVEL=%s)",
        host,
        port,
        settings.pool.min_size,
        settings.pool.max_size,
        settings.log_level,
    )


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        # Fail before binding the port when the store is not configured
        load_database_url()
        log_startup(settings.host, settings.port)
        uvicorn.run(
            "todo_backend.main:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except FatalStartupError as exc:
        logger.error("Fatal startup error: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Shutdown requested...")
        sys.exit(0)


if __name__ == "__main__":
    main()
