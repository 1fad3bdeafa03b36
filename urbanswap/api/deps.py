"""
FastAPI dependencies that hand each request a store bound to the shared pool.

Tests swap these out through app.dependency_overrides.
"""

from urbanswap.database.connection import get_pool
from urbanswap.stores import ListingStore, SwapStore, UserStore


def get_user_store() -> UserStore:
    return UserStore(get_pool())


def get_listing_store() -> ListingStore:
    return ListingStore(get_pool())


def get_swap_store() -> SwapStore:
    return SwapStore(get_pool())
