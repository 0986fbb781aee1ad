"""asyncpg connection pools for the source and destination databases."""

import asyncpg
import structlog

from migrator.config import Settings
from migrator.core.exceptions import ConnectivityError

logger = structlog.get_logger(__name__)


def to_asyncpg_dsn(url: str) -> str:
    """Convert a SQLAlchemy-style URL to asyncpg format."""
    return url.replace("postgresql+asyncpg://", "postgresql://", 1)


async def create_pool(url: str, settings: Settings) -> asyncpg.Pool:
    """Open a pool that stays open for the whole run."""
    return await asyncpg.create_pool(
        to_asyncpg_dsn(url),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        # Disable statement cache for pgbouncer compatibility
        statement_cache_size=settings.db_statement_cache_size,
    )


async def connect(name: str, url: str, settings: Settings) -> asyncpg.Pool:
    """Open a pool and run `SELECT 1` on it.

    Raises:
        ConnectivityError: If the database cannot be reached
    """
    logger.info("Connecting to database", database=name, host=url.split("@")[-1].split("/")[0])
    try:
        pool = await create_pool(url, settings)
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        raise ConnectivityError(name, str(e)) from e

    try:
        await pool.fetchval("SELECT 1")
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        await pool.close()
        raise ConnectivityError(name, str(e)) from e

    logger.info("Connected", database=name, status="ok")
    return pool


async def close_pools(*pools: asyncpg.Pool | None) -> None:
    """Release pools opened by `connect`."""
    for pool in pools:
        if pool is not None:
            await pool.close()
