# Re-export all models
from urbanswap.models.listing import CATEGORIES, Listing, ListingCreate, ListingOwner, ListingUpdate
from urbanswap.models.responses import (
    ApiResponse,
    AuthPayload,
    ErrorResponse,
    HealthResponse,
    ListingPagePayload,
    ListingPayload,
    ListingsPayload,
    MessageResponse,
    Pagination,
    SwapPayload,
    SwapsPayload,
    UserPayload,
)
from urbanswap.models.swap import SETTABLE_STATUSES, Swap, SwapCreate, SwapListingSummary, SwapParty, SwapStatusUpdate
from urbanswap.models.user import UserLogin, UserPublic, UserRegister, UserUpdate

__all__ = [
    # User models
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "UserPublic",
    # Listing models
    "CATEGORIES",
    "Listing",
    "ListingCreate",
    "ListingUpdate",
    "ListingOwner",
    # Swap models
    "SETTABLE_STATUSES",
    "Swap",
    "SwapCreate",
    "SwapStatusUpdate",
    "SwapParty",
    "SwapListingSummary",
    # Envelopes
    "ApiResponse",
    "ErrorResponse",
    "MessageResponse",
    "AuthPayload",
    "UserPayload",
    "ListingPayload",
    "ListingsPayload",
    "ListingPagePayload",
    "Pagination",
    "SwapPayload",
    "SwapsPayload",
    "HealthResponse",
]
