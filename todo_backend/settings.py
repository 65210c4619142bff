from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .errors import FatalStartupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolSettings:
    min_size: int = 2
    max_size: int = 6
    idle_timeout_seconds: float = 60.0
    acquire_timeout_seconds: float = 30.0
    connect_retries: int = 5
    retry_delay_seconds: float = 3.0


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    host: str
    port: int
    log_level: str
    pool: PoolSettings


def parse_int_env(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer env value '%s', using default=%s", value, default)
        return default


def load_database_url() -> str:
    database_url = (os.getenv("DATABASE_URL") or "").strip()
    if not database_url:
        raise FatalStartupError("Environment variable DATABASE_URL is not set")
    return database_url


def load_pool_settings() -> PoolSettings:
    defaults = PoolSettings()
    return PoolSettings(
        min_size=parse_int_env(os.getenv("DB_POOL_MIN_SIZE"), defaults.min_size),
        max_size=parse_int_env(os.getenv("DB_POOL_MAX_SIZE"), defaults.max_size),
        idle_timeout_seconds=float(
            parse_int_env(os.getenv("DB_POOL_IDLE_TIMEOUT"), int(defaults.idle_timeout_seconds))
        ),
        acquire_timeout_seconds=float(
            parse_int_env(os.getenv("DB_POOL_ACQUIRE_TIMEOUT"), int(defaults.acquire_timeout_seconds))
        ),
        connect_retries=parse_int_env(os.getenv("DB_CONNECT_RETRIES"), defaults.connect_retries),
        retry_delay_seconds=float(
            parse_int_env(os.getenv("DB_CONNECT_RETRY_DELAY"), int(defaults.retry_delay_seconds))
        ),
    )


@lru_cache
def get_settings() -> Settings:
    database_url = (os.getenv("DATABASE_URL") or "").strip() or None
    return Settings(
        database_url=database_url,
        host=os.getenv("HOST", "127.0.0.1"),
        port=parse_int_env(os.getenv("PORT"), 7878),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        pool=load_pool_settings(),
    )
