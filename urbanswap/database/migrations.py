"""
Table definitions for users, listings and swaps.

Run directly to create the tables:
    python -m urbanswap.database.migrations
"""

import asyncio
import logging

from urbanswap.database.connection import create_asyncpg_pool

logger = logging.getLogger(__name__)


def create_users_table_sql():
    """Return SQL statement to create the 'users' table."""

    return """
    CREATE TABLE IF NOT EXISTS users (
      id UUID PRIMARY KEY,
      email VARCHAR(255) NOT NULL UNIQUE,
      password_hash VARCHAR(255) NOT NULL,
      full_name VARCHAR(100) NOT NULL,
      location VARCHAR(100),
      phone VARCHAR(30),
      avatar_url VARCHAR(500),
      points INTEGER NOT NULL DEFAULT 0,

      created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );
    """


def create_listings_table_sql():
    """Return SQL statement to create the 'listings' table."""

    return """
    CREATE TABLE IF NOT EXISTS listings (
      id UUID PRIMARY KEY,
      user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
      title VARCHAR(200) NOT NULL,
      description TEXT NOT NULL,
      category VARCHAR(50) NOT NULL
        CHECK (category IN ('Urban Goods', 'Skills Exchange', 'Community Hub')),
      location VARCHAR(100) NOT NULL,
      price VARCHAR(50),
      swap_preferences TEXT,
      image_url VARCHAR(2048),
      status VARCHAR(20) NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive')),
      featured BOOLEAN NOT NULL DEFAULT FALSE,

      created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );

    CREATE INDEX IF NOT EXISTS idx_listings_user ON listings(user_id);
    CREATE INDEX IF NOT EXISTS idx_listings_active_created ON listings(status, created_at DESC);
    """


def create_swaps_table_sql():
    """Return SQL statement to create the 'swaps' table."""

    return """
    CREATE TABLE IF NOT EXISTS swaps (
      id UUID PRIMARY KEY,
      listing_id UUID NOT NULL REFERENCES listings(id) ON DELETE CASCADE,
      requester_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
      owner_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
      offer_type VARCHAR(20) NOT NULL CHECK (offer_type IN ('item', 'service', 'money', 'experience')),
      offer_details TEXT NOT NULL,
      message TEXT,
      status VARCHAR(20) NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'accepted', 'rejected', 'completed', 'cancelled')),

      created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );

    CREATE INDEX IF NOT EXISTS idx_swaps_requester ON swaps(requester_id);
    CREATE INDEX IF NOT EXISTS idx_swaps_owner ON swaps(owner_id);
    """


MIGRATIONS = [
    ("users", create_users_table_sql),
    ("listings", create_listings_table_sql),
    ("swaps", create_swaps_table_sql),
]


async def run_migrations(pool) -> None:
    async with pool.acquire() as conn:
        for table_name, create_sql in MIGRATIONS:
            await conn.execute(create_sql())
            logger.info(f"'{table_name}' table ready")


def main():
    """Create all tables."""

    async def run():
        pool = await create_asyncpg_pool()
        try:
            await run_migrations(pool)
        finally:
            await pool.close()

    asyncio.run(run())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
