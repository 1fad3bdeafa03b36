from urbanswap.stores.listings import ListingStore
from urbanswap.stores.swaps import SwapStore
from urbanswap.stores.users import UserStore

__all__ = ["UserStore", "ListingStore", "SwapStore"]
