from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

Category = Literal["Urban Goods", "Skills Exchange", "Community Hub"]
ListingStatus = Literal["active", "inactive"]

CATEGORIES: tuple[str, ...] = ("Urban Goods", "Skills Exchange", "Community Hub")

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=5000)]
Location = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]


class ListingCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Title
    description: Description
    category: Category
    location: Location

    # Free text, e.g. "Free", "500" or "₹1,200 or swap"
    price: Annotated[str, Field(max_length=50)] | None = None
    swap_preferences: Annotated[str, Field(max_length=1000)] | None = None


class ListingUpdate(BaseModel):
    """Partial update. Ownership and the featured flag are not editable."""

    model_config = ConfigDict(extra="ignore")

    title: Title | None = None
    description: Description | None = None
    category: Category | None = None
    location: Location | None = None
    price: Annotated[str, Field(max_length=50)] | None = None
    swap_preferences: Annotated[str, Field(max_length=1000)] | None = None
    status: ListingStatus | None = None


class ListingOwner(BaseModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None
    location: str | None = None
    phone: str | None = None


class Listing(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    category: Category
    location: str
    price: str | None = None
    swap_preferences: str | None = None
    image_url: str | None = None
    status: ListingStatus = "active"
    featured: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    owner: ListingOwner | None = None
