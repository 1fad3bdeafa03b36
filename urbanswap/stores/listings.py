"""
Listing store.

update/delete filter on both the listing id and the caller id, so a listing
that exists but belongs to someone else looks exactly like a missing one.
"""

import logging

import asyncpg  # type: ignore

from urbanswap.database.query_builder import QueryBuilder
from urbanswap.stores.common import as_uuid, like_pattern, new_id, record_to_dict

logger = logging.getLogger(__name__)

OWNER_SUMMARY = """
    json_build_object(
        'id', u.id,
        'full_name', u.full_name,
        'avatar_url', u.avatar_url,
        'location', u.location
    ) AS owner
"""

OWNER_WITH_CONTACT = """
    json_build_object(
        'id', u.id,
        'full_name', u.full_name,
        'avatar_url', u.avatar_url,
        'location', u.location,
        'phone', u.phone
    ) AS owner
"""

EDITABLE_FIELDS = (
    "title",
    "description",
    "category",
    "location",
    "price",
    "swap_preferences",
    "image_url",
    "status",
)


def _filter_clause(category: str | None, location: str | None, search: str | None) -> tuple[str, list]:
    """WHERE clause for the public feed. Only active listings are ever shown."""
    conditions = ["l.status = 'active'"]
    values: list = []

    if category:
        values.append(category)
        conditions.append(f"l.category = ${len(values)}")
    if location:
        values.append(like_pattern(location))
        conditions.append(f"l.location ILIKE ${len(values)}")
    if search:
        values.append(like_pattern(search))
        conditions.append(f"(l.title ILIKE ${len(values)} OR l.description ILIKE ${len(values)})")

    return " AND ".join(conditions), values


class ListingStore:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(self, owner_id: str, fields: dict) -> dict:
        """Persist an active listing and return it joined with the owner's public profile."""
        listing_data = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
        listing_data.update({"id": new_id(), "user_id": as_uuid(owner_id), "status": "active"})

        insert_query, values = QueryBuilder.build_insert_query(listing_data, "listings", returning="*")
        query = f"""
            WITH inserted AS ({insert_query})
            SELECT l.*, {OWNER_SUMMARY}
            FROM inserted l
            JOIN users u ON u.id = l.user_id
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *values)

        logger.info(f"Created listing {listing_data['id']} for user {owner_id}")
        return record_to_dict(row, json_columns=("owner",))

    async def find_all(
        self,
        category: str | None = None,
        location: str | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict]:
        """Active listings matching the filters, newest first."""
        where, values = _filter_clause(category, location, search)
        query = f"""
            SELECT l.*, {OWNER_SUMMARY}
            FROM listings l
            JOIN users u ON u.id = l.user_id
            WHERE {where}
            ORDER BY l.created_at DESC
        """
        if limit is not None:
            values.extend([limit, offset])
            query += f" LIMIT ${len(values) - 1} OFFSET ${len(values)}"

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *values)
        return [record_to_dict(row, json_columns=("owner",)) for row in rows]

    async def count(
        self,
        category: str | None = None,
        location: str | None = None,
        search: str | None = None,
    ) -> int:
        where, values = _filter_clause(category, location, search)
        async with self.pool.acquire() as conn:
            return await conn.fetchval(f"SELECT COUNT(*) FROM listings l WHERE {where}", *values)

    async def find_by_id(self, listing_id: str) -> dict | None:
        """Any status. The owner block includes the phone number."""
        listing_uuid = as_uuid(listing_id)
        if listing_uuid is None:
            return None
        query = f"""
            SELECT l.*, {OWNER_WITH_CONTACT}
            FROM listings l
            JOIN users u ON u.id = l.user_id
            WHERE l.id = $1
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, listing_uuid)
        return record_to_dict(row, json_columns=("owner",)) if row else None

    async def find_by_owner(self, owner_id: str) -> list[dict]:
        """All of a user's listings, active or not, newest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM listings WHERE user_id = $1 ORDER BY created_at DESC",
                as_uuid(owner_id),
            )
        return [record_to_dict(row) for row in rows]

    async def update(self, listing_id: str, fields: dict, caller_id: str) -> dict | None:
        """Returns None when the listing is missing or not owned by caller_id."""
        listing_uuid, caller_uuid = as_uuid(listing_id), as_uuid(caller_id)
        if listing_uuid is None or caller_uuid is None:
            return None

        updates = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
        query, values = QueryBuilder.build_update_query(
            updates, "listings", {"id": listing_uuid, "user_id": caller_uuid}, returning="*"
        )
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *values)
        return record_to_dict(row) if row else None

    async def delete(self, listing_id: str, caller_id: str) -> dict | None:
        """Same ownership contract as update. Returns the deleted row."""
        listing_uuid, caller_uuid = as_uuid(listing_id), as_uuid(caller_id)
        if listing_uuid is None or caller_uuid is None:
            return None

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "DELETE FROM listings WHERE id = $1 AND user_id = $2 RETURNING *",
                listing_uuid,
                caller_uuid,
            )
        return record_to_dict(row) if row else None

    async def get_featured(self, limit: int = 6) -> list[dict]:
        query = f"""
            SELECT l.*, {OWNER_SUMMARY}
            FROM listings l
            JOIN users u ON u.id = l.user_id
            WHERE l.status = 'active' AND l.featured = TRUE
            ORDER BY l.created_at DESC
            LIMIT $1
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, max(limit, 0))
        return [record_to_dict(row, json_columns=("owner",)) for row in rows]
