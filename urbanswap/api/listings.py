import logging
import math

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError

from urbanswap import config
from urbanswap.api.deps import get_listing_store, get_user_store
from urbanswap.errors import AppError, NotFoundError, ValidationError, unexpected, validation_failed
from urbanswap.middleware.auth import get_current_user, get_optional_user
from urbanswap.middleware.rate_limit import limiter
from urbanswap.models import (
    ApiResponse,
    ListingCreate,
    ListingPagePayload,
    ListingPayload,
    ListingsPayload,
    ListingUpdate,
    MessageResponse,
    Pagination,
)
from urbanswap.models.listing import Category
from urbanswap.services.image_storage import ImageUploadError, delete_image_from_storage, upload_listing_image
from urbanswap.stores import ListingStore, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["listings"])

NOT_FOUND_FOR_UPDATE = "Listing not found or you do not have permission to update it"
NOT_FOUND_FOR_DELETE = "Listing not found or you do not have permission to delete it"


def _form_fields(**fields) -> dict:
    """Drop fields the client did not send; blank strings count as not sent."""
    return {key: value for key, value in fields.items() if value is not None and value != ""}


def _has_file(image: UploadFile | None) -> bool:
    return image is not None and bool(image.filename)


async def _upload(image: UploadFile, key: str) -> str:
    try:
        return await upload_listing_image(image, listing_key=key)
    except ImageUploadError as e:
        raise ValidationError(str(e))


@router.get("", response_model=ApiResponse[ListingPagePayload])
@limiter.limit("60/minute")
async def get_listings(
    request: Request,
    category: Category | None = Query(None),
    location: str | None = Query(None, max_length=100),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1, description="Page number (starts at 1)"),
    limit: int = Query(12, ge=1, le=100, description="Items per page (max 100)"),
    viewer: dict | None = Depends(get_optional_user),
    listings: ListingStore = Depends(get_listing_store),
):
    """Public feed of active listings, newest first, with optional filters."""
    filters = {"category": category, "location": location, "search": search}
    offset = (page - 1) * limit
    logger.info(f"Listing feed: filters={filters}, page={page}, limit={limit}, viewer={viewer['id'] if viewer else None}")

    try:
        total = await listings.count(**filters)
        rows = await listings.find_all(**filters, limit=limit, offset=offset)
    except Exception as e:
        logger.error(f"Error fetching listings: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Failed to get listings", e)

    total_pages = math.ceil(total / limit) if total > 0 else 0
    pagination = Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )
    return ApiResponse[ListingPagePayload](data=ListingPagePayload(listings=rows, pagination=pagination))


@router.get("/featured", response_model=ApiResponse[ListingsPayload])
@limiter.limit("60/minute")
async def get_featured_listings(
    request: Request,
    limit: int = Query(6, ge=1, le=50),
    listings: ListingStore = Depends(get_listing_store),
):
    try:
        rows = await listings.get_featured(limit)
    except Exception as e:
        logger.error(f"Error fetching featured listings: {e}", exc_info=True)
        raise unexpected("Failed to get featured listings", e)
    return ApiResponse[ListingsPayload](data=ListingsPayload(listings=rows))


@router.get("/user/my-listings", response_model=ApiResponse[ListingsPayload])
@limiter.limit("60/minute")
async def get_my_listings(
    request: Request,
    current_user: dict = Depends(get_current_user),
    listings: ListingStore = Depends(get_listing_store),
):
    """All listings owned by the authenticated user, including inactive ones."""
    try:
        rows = await listings.find_by_owner(current_user["id"])
    except Exception as e:
        logger.error(f"Error fetching user's listings: {e}", exc_info=True)
        raise unexpected("Failed to get user listings", e)
    return ApiResponse[ListingsPayload](data=ListingsPayload(listings=rows))


@router.get("/{listing_id}", response_model=ApiResponse[ListingPayload])
@limiter.limit("100/minute")
async def get_listing(
    request: Request,
    listing_id: str,
    viewer: dict | None = Depends(get_optional_user),
    listings: ListingStore = Depends(get_listing_store),
):
    try:
        listing = await listings.find_by_id(listing_id)
    except Exception as e:
        logger.error(f"Error fetching listing {listing_id}: {e}", exc_info=True)
        raise unexpected("Failed to get listing", e)

    if not listing:
        raise NotFoundError("Listing not found")
    return ApiResponse[ListingPayload](data=ListingPayload(listing=listing))


@router.post("", status_code=201, response_model=ApiResponse[ListingPayload])
@limiter.limit("15/hour")
async def create_listing(
    request: Request,
    title: str | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    location: str | None = Form(None),
    price: str | None = Form(None),
    swap_preferences: str | None = Form(None),
    image: UploadFile | None = File(None),
    current_user: dict = Depends(get_current_user),
    listings: ListingStore = Depends(get_listing_store),
    users: UserStore = Depends(get_user_store),
):
    """
    Create a listing from a multipart form with an optional image.

    The image is uploaded before the row is written and removed again if the
    write fails. The owner earns listing points after the row exists.
    """
    try:
        listing_data = ListingCreate.model_validate(
            _form_fields(
                title=title,
                description=description,
                category=category,
                location=location,
                price=price,
                swap_preferences=swap_preferences,
            )
        )
    except PydanticValidationError as e:
        raise validation_failed(e)

    fields = listing_data.model_dump(exclude_none=True)
    user_id = current_user["id"]

    if _has_file(image):
        fields["image_url"] = await _upload(image, key=user_id)

    try:
        listing = await listings.create(user_id, fields)
    except Exception as e:
        logger.error(f"Error creating listing: {type(e).__name__}: {str(e)}", exc_info=True)
        if fields.get("image_url"):
            logger.info(f"Cleaning up uploaded image {fields['image_url']}")
            await delete_image_from_storage(fields["image_url"])
        raise unexpected("Failed to create listing", e)

    try:
        await users.add_points(user_id, config.LISTING_CREATED_POINTS)
    except Exception as e:
        logger.error(f"Listing {listing['id']} created but awarding points failed: {e}", exc_info=True)
        raise unexpected("Failed to create listing", e)

    return ApiResponse[ListingPayload](message="Listing created successfully", data=ListingPayload(listing=listing))


@router.put("/{listing_id}", response_model=ApiResponse[ListingPayload])
@limiter.limit("10/minute")
async def update_listing(
    request: Request,
    listing_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    location: str | None = Form(None),
    price: str | None = Form(None),
    swap_preferences: str | None = Form(None),
    status: str | None = Form(None),
    image: UploadFile | None = File(None),
    current_user: dict = Depends(get_current_user),
    listings: ListingStore = Depends(get_listing_store),
):
    """
    Partial update by the owner. A new image replaces the old one.

    Missing listings and listings owned by someone else get the same 404.
    """
    try:
        updates = ListingUpdate.model_validate(
            _form_fields(
                title=title,
                description=description,
                category=category,
                location=location,
                price=price,
                swap_preferences=swap_preferences,
                status=status,
            )
        )
    except PydanticValidationError as e:
        raise validation_failed(e)

    fields = updates.model_dump(exclude_none=True)
    user_id = current_user["id"]
    old_image_url = None
    new_image_url = None

    try:
        if _has_file(image):
            existing = await listings.find_by_id(listing_id)
            if not existing or existing["user_id"] != user_id:
                raise NotFoundError(NOT_FOUND_FOR_UPDATE)
            old_image_url = existing.get("image_url")
            new_image_url = await _upload(image, key=user_id)
            fields["image_url"] = new_image_url

        listing = await listings.update(listing_id, fields, user_id)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error updating listing {listing_id}: {type(e).__name__}: {str(e)}", exc_info=True)
        if new_image_url:
            logger.info(f"Cleaning up uploaded image {new_image_url}")
            await delete_image_from_storage(new_image_url)
        raise unexpected("Failed to update listing", e)

    if not listing:
        # Row went away after the ownership check
        if new_image_url:
            await delete_image_from_storage(new_image_url)
        raise NotFoundError(NOT_FOUND_FOR_UPDATE)

    if old_image_url:
        await delete_image_from_storage(old_image_url)

    logger.info(f"Successfully updated listing {listing_id}: {list(fields.keys())}")
    return ApiResponse[ListingPayload](message="Listing updated successfully", data=ListingPayload(listing=listing))


@router.delete("/{listing_id}", response_model=MessageResponse)
@limiter.limit("10/minute")
async def delete_listing(
    request: Request,
    listing_id: str,
    current_user: dict = Depends(get_current_user),
    listings: ListingStore = Depends(get_listing_store),
):
    try:
        deleted = await listings.delete(listing_id, current_user["id"])
    except Exception as e:
        logger.error(f"Error deleting listing {listing_id}: {e}", exc_info=True)
        raise unexpected("Failed to delete listing", e)

    if not deleted:
        raise NotFoundError(NOT_FOUND_FOR_DELETE)

    # Delete from storage after the row is gone
    if deleted.get("image_url"):
        await delete_image_from_storage(deleted["image_url"])

    logger.info(f"Successfully deleted listing: {listing_id}")
    return MessageResponse(message="Listing deleted successfully")
