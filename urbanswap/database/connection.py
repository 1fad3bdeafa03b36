"""
UrbanSwap Database Connection

A single asyncpg pool per process, created in the app lifespan and closed on
shutdown. Stores borrow connections from it for each call.
"""

import logging
import urllib.parse

import asyncpg  # type: ignore

from urbanswap import config

logger = logging.getLogger(__name__)


def build_asyncpg_url() -> str:
    """DATABASE_URL if set, otherwise built from the URBANSWAP_DB_* variables."""
    if config.DATABASE_URL:
        # asyncpg does not understand SQLAlchemy style driver suffixes
        return config.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://", 1)

    if not all([config.DB_USER, config.DB_PASSWORD, config.DB_NAME, config.DB_HOST]):
        raise ValueError("Missing required URBANSWAP database environment variables")

    # URL encode password to handle special characters
    encoded_password = urllib.parse.quote_plus(config.DB_PASSWORD)
    return f"postgresql://{config.DB_USER}:{encoded_password}@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"


# Global pool instance
_db_pool: asyncpg.Pool | None = None


async def create_asyncpg_pool(dsn: str | None = None) -> asyncpg.Pool:
    url = dsn or build_asyncpg_url()
    logger.info(f"Connecting to database at {urllib.parse.urlsplit(url).hostname}")
    return await asyncpg.create_pool(
        url,
        min_size=0,
        max_size=config.DB_POOL_MAX,
        command_timeout=60,
    )


def get_pool() -> asyncpg.Pool:
    """Get database pool with runtime check"""
    if _db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return _db_pool
