"""
Swap store.

The owner of a swap is copied from the listing when the swap is created and
never changes afterwards; only the status moves.
"""

import logging

import asyncpg  # type: ignore

from urbanswap.database.query_builder import QueryBuilder
from urbanswap.errors import NotFoundError, SelfSwapError, ValidationError
from urbanswap.models.swap import SETTABLE_STATUSES
from urbanswap.stores.common import as_uuid, new_id, record_to_dict

logger = logging.getLogger(__name__)

JSON_COLUMNS = ("requester", "owner", "listing")

SUMMARY_SELECT = """
    SELECT
        s.*,
        json_build_object('id', r.id, 'full_name', r.full_name, 'avatar_url', r.avatar_url) AS requester,
        json_build_object('id', o.id, 'full_name', o.full_name, 'avatar_url', o.avatar_url) AS owner,
        json_build_object('id', l.id, 'title', l.title, 'image_url', l.image_url) AS listing
    FROM swaps s
    JOIN users r ON r.id = s.requester_id
    JOIN users o ON o.id = s.owner_id
    JOIN listings l ON l.id = s.listing_id
"""

DETAIL_SELECT = """
    SELECT
        s.*,
        json_build_object(
            'id', r.id, 'full_name', r.full_name, 'avatar_url', r.avatar_url, 'phone', r.phone
        ) AS requester,
        json_build_object(
            'id', o.id, 'full_name', o.full_name, 'avatar_url', o.avatar_url, 'phone', o.phone
        ) AS owner,
        json_build_object(
            'id', l.id, 'title', l.title, 'image_url', l.image_url, 'description', l.description
        ) AS listing
    FROM swaps s
    JOIN users r ON r.id = s.requester_id
    JOIN users o ON o.id = s.owner_id
    JOIN listings l ON l.id = s.listing_id
"""


class SwapStore:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(
        self,
        listing_id: str,
        requester_id: str,
        offer_type: str,
        offer_details: str,
        message: str | None = None,
    ) -> dict:
        """
        Create a pending swap on a listing.

        Raises NotFoundError for an unknown listing and SelfSwapError when the
        requester owns the listing.
        """
        listing_uuid = as_uuid(listing_id)
        async with self.pool.acquire() as conn:
            listing_owner = None
            if listing_uuid is not None:
                listing_owner = await conn.fetchval("SELECT user_id FROM listings WHERE id = $1", listing_uuid)

            if listing_owner is None:
                raise NotFoundError("Listing not found")

            if str(listing_owner) == str(requester_id):
                raise SelfSwapError()

            swap_data = {
                "id": new_id(),
                "listing_id": listing_uuid,
                "requester_id": as_uuid(requester_id),
                "owner_id": listing_owner,
                "offer_type": offer_type,
                "offer_details": offer_details,
                "message": message,
                "status": "pending",
            }
            query, values = QueryBuilder.build_insert_query(swap_data, "swaps")
            await conn.execute(query, *values)

            row = await conn.fetchrow(f"{SUMMARY_SELECT} WHERE s.id = $1", swap_data["id"])

        logger.info(f"Created swap {swap_data['id']} on listing {listing_id} by user {requester_id}")
        return record_to_dict(row, json_columns=JSON_COLUMNS)

    async def find_by_user(self, user_id: str) -> list[dict]:
        """Swaps where the user is requester or owner, newest first."""
        user_uuid = as_uuid(user_id)
        if user_uuid is None:
            return []
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"{SUMMARY_SELECT} WHERE s.requester_id = $1 OR s.owner_id = $1 ORDER BY s.created_at DESC",
                user_uuid,
            )
        return [record_to_dict(row, json_columns=JSON_COLUMNS) for row in rows]

    async def find_by_id(self, swap_id: str) -> dict | None:
        swap_uuid = as_uuid(swap_id)
        if swap_uuid is None:
            return None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{DETAIL_SELECT} WHERE s.id = $1", swap_uuid)
        return record_to_dict(row, json_columns=JSON_COLUMNS) if row else None

    async def update_status(self, swap_id: str, status: str, caller_id: str) -> dict | None:
        """
        Set the status if caller_id is the requester or the owner.

        The current status is not consulted: any settable status can be
        reached from any other, including from a terminal one.
        Returns None when the swap is missing or the caller is not a participant.
        """
        if status not in SETTABLE_STATUSES:
            raise ValidationError("Invalid status", errors=[f"status: must be one of {', '.join(SETTABLE_STATUSES)}"])

        swap_uuid, caller_uuid = as_uuid(swap_id), as_uuid(caller_id)
        if swap_uuid is None or caller_uuid is None:
            return None

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE swaps
                SET status = $1, updated_at = NOW()
                WHERE id = $2 AND (requester_id = $3 OR owner_id = $3)
                RETURNING *
                """,
                status,
                swap_uuid,
                caller_uuid,
            )
        return record_to_dict(row) if row else None
