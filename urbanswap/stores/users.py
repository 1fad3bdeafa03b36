"""
Credential store: user records, password hashes and points.

The password hash never leaves this module except through find_by_email,
which the login handler needs for verification.
"""

import asyncio
import logging

import asyncpg  # type: ignore
import bcrypt

from urbanswap import config
from urbanswap.database.query_builder import QueryBuilder
from urbanswap.errors import ConflictError
from urbanswap.stores.common import as_uuid, new_id, record_to_dict

logger = logging.getLogger(__name__)

PUBLIC_COLUMNS = "id, email, full_name, location, phone, avatar_url, points, created_at, updated_at"


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)).decode("utf-8")


def check_password(plain_password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


class UserStore:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @staticmethod
    async def verify_password(plain_password: str, password_hash: str | None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, check_password, plain_password, password_hash)

    async def create(
        self,
        email: str,
        password: str,
        full_name: str,
        location: str | None = None,
        phone: str | None = None,
    ) -> dict:
        """Create a user. Raises ConflictError when the email is taken."""
        email = email.strip().lower()
        if await self.find_by_email(email):
            raise ConflictError("User with this email already exists")

        loop = asyncio.get_running_loop()
        password_hash = await loop.run_in_executor(None, hash_password, password)

        user_data = {
            "id": new_id(),
            "email": email,
            "password_hash": password_hash,
            "full_name": full_name,
            "location": location,
            "phone": phone,
        }
        query, values = QueryBuilder.build_insert_query(user_data, "users", returning=PUBLIC_COLUMNS)

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, *values)
        except asyncpg.UniqueViolationError:
            # Lost a race with a concurrent registration
            raise ConflictError("User with this email already exists")

        return record_to_dict(row)

    async def find_by_email(self, email: str) -> dict | None:
        """Full user row, password hash included."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM users WHERE email = $1", email.strip().lower())
        return record_to_dict(row) if row else None

    async def find_by_id(self, user_id: str) -> dict | None:
        user_uuid = as_uuid(user_id)
        if user_uuid is None:
            return None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {PUBLIC_COLUMNS} FROM users WHERE id = $1", user_uuid)
        return record_to_dict(row) if row else None

    async def update_profile(self, user_id: str, fields: dict) -> dict | None:
        """Partial update; None values are skipped. Returns the refreshed profile."""
        user_uuid = as_uuid(user_id)
        if user_uuid is None:
            return None

        updates = {key: value for key, value in fields.items() if value is not None}
        if not updates:
            return await self.find_by_id(user_id)

        query, values = QueryBuilder.build_update_query(
            updates, "users", {"id": user_uuid}, returning=PUBLIC_COLUMNS
        )
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *values)
        return record_to_dict(row) if row else None

    async def update_points(self, user_id: str, points: int) -> dict | None:
        """
        Set the absolute points total.

        Read-modify-write through this method races with concurrent awards;
        use add_points for awards.
        """
        query, values = QueryBuilder.build_update_query(
            {"points": points}, "users", {"id": as_uuid(user_id)}, returning="points"
        )
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *values)
        return dict(row) if row else None

    async def add_points(self, user_id: str, amount: int) -> int | None:
        """Atomically increment points. Returns the new total, or None for an unknown user."""
        async with self.pool.acquire() as conn:
            points = await conn.fetchval(
                """
                UPDATE users
                SET points = points + $1, updated_at = NOW()
                WHERE id = $2
                RETURNING points
                """,
                amount,
                as_uuid(user_id),
            )
        if points is not None:
            logger.info(f"Awarded {amount} points to user {user_id} (total {points})")
        return points
