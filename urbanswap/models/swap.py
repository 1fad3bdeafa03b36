from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

OfferType = Literal["item", "service", "money", "experience"]
SwapStatus = Literal["pending", "accepted", "rejected", "completed", "cancelled"]

# Any of these may be set from any current status.
SETTABLE_STATUSES: tuple[str, ...] = ("accepted", "rejected", "completed", "cancelled")


class SwapCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    listing_id: Annotated[str, Field(min_length=1, max_length=64)]
    offer_type: OfferType
    offer_details: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
    message: Annotated[str, Field(max_length=2000)] | None = None


class SwapStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected", "completed", "cancelled"]


class SwapParty(BaseModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    phone: str | None = None


class SwapListingSummary(BaseModel):
    id: str
    title: str | None = None
    image_url: str | None = None
    description: str | None = None


class Swap(BaseModel):
    id: str
    listing_id: str
    requester_id: str
    owner_id: str
    offer_type: OfferType
    offer_details: str
    message: str | None = None
    status: SwapStatus = "pending"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    requester: SwapParty | None = None
    owner: SwapParty | None = None
    listing: SwapListingSummary | None = None
