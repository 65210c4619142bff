"""Connection pool management for todo persistence.

The pool is created once at startup, retried with a fixed delay while the
database is unreachable, and then shared by every request through the
``Database`` object stored on the application state.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import asyncpg

from .errors import FatalStartupError, StoreError, TodoError
from .settings import PoolSettings

logger = logging.getLogger(__name__)

PoolFactory = Callable[..., Awaitable[Any]]
SleepFunc = Callable[[float], Awaitable[Any]]

CONNECT_ERRORS = (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError)

SCHEMA = """
CREATE TABLE IF NOT EXISTS todos (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT '',
    done BOOLEAN NOT NULL DEFAULT FALSE
);
"""


async def establish_pool(
    database_url: str,
    settings: PoolSettings,
    *,
    create_pool: PoolFactory = asyncpg.create_pool,
    sleep: SleepFunc = asyncio.sleep,
) -> asyncpg.Pool:
    """Create the connection pool, retrying while the database is unreachable.

    Makes ``settings.connect_retries + 1`` attempts in total with a fixed
    ``settings.retry_delay_seconds`` pause between them. Raises
    ``FatalStartupError`` once every attempt has failed.
    """
    max_retries = max(0, settings.connect_retries)
    attempt = 0
    while True:
        try:
            return await create_pool(
                dsn=database_url,
                min_size=settings.min_size,
                max_size=settings.max_size,
                max_inactive_connection_lifetime=settings.idle_timeout_seconds,
                timeout=settings.acquire_timeout_seconds,
            )
        except CONNECT_ERRORS as exc:
            if attempt >= max_retries:
                logger.error(
                    "Error connecting to database after %s retries: %s",
                    max_retries,
                    exc,
                )
                raise FatalStartupError(
                    f"Could not connect to database after {attempt + 1} attempts: {exc}"
                ) from exc
            attempt += 1
            logger.warning(
                "Error connecting to database: %s, retrying... (attempt %s of %s)",
                exc,
                attempt,
                max_retries,
            )
            await sleep(settings.retry_delay_seconds)


class Database:
    """Owns the shared connection pool."""

    def __init__(
        self,
        database_url: str,
        settings: Optional[PoolSettings] = None,
        *,
        create_pool: PoolFactory = asyncpg.create_pool,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.database_url = database_url
        self.settings = settings or PoolSettings()
        self._create_pool = create_pool
        self._sleep = sleep
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return

        self._pool = await establish_pool(
            self.database_url,
            self.settings,
            create_pool=self._create_pool,
            sleep=self._sleep,
        )
        try:
            async with self.connection() as conn:
                await conn.execute(SCHEMA)
        except (TodoError, *CONNECT_ERRORS) as exc:
            logger.exception("Failed to create todos table")
            await self.close()
            raise FatalStartupError(f"Could not initialize database schema: {exc}") from exc
        logger.info(
            "Database pool ready (min_size=%s, max_size=%s)",
            self.settings.min_size,
            self.settings.max_size,
        )

    async def close(self) -> None:
        if self._pool is None:
            return

        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        if self._pool is None:
            raise StoreError("Database pool is not initialized")
        try:
            conn = await self._pool.acquire(timeout=self.settings.acquire_timeout_seconds)
        except asyncio.TimeoutError as exc:
            logger.error(
                "Timed out after %ss waiting for a database connection",
                self.settings.acquire_timeout_seconds,
            )
            raise StoreError("Database error: timed out acquiring a connection") from exc
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            logger.exception("Failed to acquire a database connection")
            raise StoreError(f"Database error: {exc}") from exc
        try:
            yield conn
        finally:
            await self._pool.release(conn)
