"""
Tagged response envelopes.

Success responses are ApiResponse[<Payload>] with success=True and a typed
payload under "data"; failures are ErrorResponse with success=False and a
machine readable code.
"""

from datetime import datetime
from typing import Generic, List, Literal, TypeVar

from pydantic import BaseModel

from urbanswap.models.listing import Listing
from urbanswap.models.swap import Swap
from urbanswap.models.user import UserPublic

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    message: str | None = None
    data: T


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    message: str
    code: str
    errors: List[str] | None = None


class MessageResponse(BaseModel):
    success: Literal[True] = True
    message: str


class AuthPayload(BaseModel):
    user: UserPublic
    token: str


class UserPayload(BaseModel):
    user: UserPublic


class ListingPayload(BaseModel):
    listing: Listing


class ListingsPayload(BaseModel):
    listings: List[Listing]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ListingPagePayload(BaseModel):
    listings: List[Listing]
    pagination: Pagination


class SwapPayload(BaseModel):
    swap: Swap


class SwapsPayload(BaseModel):
    swaps: List[Swap]


class HealthResponse(BaseModel):
    success: Literal[True] = True
    status: str
    message: str
    timestamp: datetime
    environment: str
