"""PostgreSQL connection pool management.

One asyncpg pool is shared by the record gateways and the activity log
store of a process. Every connection gets a JSONB codec, so record
documents and field changes cross the driver as plain dicts and lists.
"""

import json
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from chronicle.config.models.storage import PostgresConfig
from chronicle.db.errors import ConnectionError
from chronicle.observability.logging import get_logger

logger = get_logger(__name__)


def resolve_dsn(config: PostgresConfig) -> str:
    """Connection URL from config, else CHRONICLE_DATABASE_URL, DATABASE_URL or POSTGRES_*."""
    for candidate in (
        config.connection_url,
        os.environ.get("CHRONICLE_DATABASE_URL"),
        os.environ.get("DATABASE_URL"),
    ):
        if candidate:
            return candidate

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    user = os.environ.get("POSTGRES_USER", "chronicle")
    password = os.environ.get("POSTGRES_PASSWORD", "chronicle")
    database = os.environ.get("POSTGRES_DB", "chronicle")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


async def _register_codecs(connection: asyncpg.Connection) -> None:
    await connection.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


class PostgresPool:
    """Lazily connected asyncpg pool.

    Usage:
        pool = PostgresPool(settings.storage.postgres)
        await pool.connect()
        try:
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO ...")
        finally:
            await pool.close()
    """

    def __init__(self, config: PostgresConfig | None = None) -> None:
        self._config = config or PostgresConfig()
        self._dsn = resolve_dsn(self._config)
        self._pool: asyncpg.Pool | None = None

    @property
    def config(self) -> PostgresConfig:
        return self._config

    @property
    def dsn(self) -> str:
        return self._dsn

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Open the pool; a no-op when already open.

        Raises:
            ConnectionError: If the server cannot be reached.
        """
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._config.min_pool_size,
                max_size=self._config.max_pool_size,
                max_inactive_connection_lifetime=self._config.max_inactive_connection_lifetime,
                command_timeout=self._config.command_timeout,
                init=_register_codecs,
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._config.min_pool_size,
            max_size=self._config.max_pool_size,
        )

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting first if needed.

        Driver errors raised inside the block surface as ConnectionError.
        """
        await self.connect()
        try:
            async with self._pool.acquire() as connection:
                yield connection
        except asyncpg.PostgresError as e:
            logger.error("postgres_query_failed", error=str(e))
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection and run the block in one transaction."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def health_check(self) -> bool:
        """True when the pool is open and answers ``SELECT 1``."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (asyncpg.PostgresError, OSError) as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
