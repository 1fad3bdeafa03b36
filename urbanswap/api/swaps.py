import logging

from fastapi import APIRouter, Depends, Request

from urbanswap import config
from urbanswap.api.deps import get_swap_store, get_user_store
from urbanswap.errors import AppError, ForbiddenError, NotFoundError, unexpected
from urbanswap.middleware.auth import get_current_user
from urbanswap.middleware.rate_limit import limiter
from urbanswap.models import ApiResponse, SwapCreate, SwapPayload, SwapsPayload, SwapStatusUpdate
from urbanswap.stores import SwapStore, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/swaps", tags=["swaps"])


@router.post("", status_code=201, response_model=ApiResponse[SwapPayload])
@limiter.limit("20/hour")
async def create_swap(
    request: Request,
    payload: SwapCreate,
    current_user: dict = Depends(get_current_user),
    swaps: SwapStore = Depends(get_swap_store),
):
    """Offer something in exchange for a listing. The listing owner becomes the swap owner."""
    try:
        swap = await swaps.create(
            listing_id=payload.listing_id,
            requester_id=current_user["id"],
            offer_type=payload.offer_type,
            offer_details=payload.offer_details,
            message=payload.message,
        )
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error creating swap: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Failed to create swap request", e)

    return ApiResponse[SwapPayload](message="Swap request created successfully", data=SwapPayload(swap=swap))


@router.get("", response_model=ApiResponse[SwapsPayload])
@limiter.limit("60/minute")
async def get_user_swaps(
    request: Request,
    current_user: dict = Depends(get_current_user),
    swaps: SwapStore = Depends(get_swap_store),
):
    try:
        rows = await swaps.find_by_user(current_user["id"])
    except Exception as e:
        logger.error(f"Error fetching swaps for user {current_user['id']}: {e}", exc_info=True)
        raise unexpected("Failed to get swaps", e)
    return ApiResponse[SwapsPayload](data=SwapsPayload(swaps=rows))


@router.get("/{swap_id}", response_model=ApiResponse[SwapPayload])
@limiter.limit("60/minute")
async def get_swap(
    request: Request,
    swap_id: str,
    current_user: dict = Depends(get_current_user),
    swaps: SwapStore = Depends(get_swap_store),
):
    """Swap detail with contact numbers. Only the two participants may see it."""
    try:
        swap = await swaps.find_by_id(swap_id)
    except Exception as e:
        logger.error(f"Error fetching swap {swap_id}: {e}", exc_info=True)
        raise unexpected("Failed to get swap", e)

    if not swap:
        raise NotFoundError("Swap not found")

    if current_user["id"] not in (swap["requester_id"], swap["owner_id"]):
        logger.warning(f"User {current_user['id']} tried to view swap {swap_id}")
        raise ForbiddenError("You do not have permission to view this swap")

    return ApiResponse[SwapPayload](data=SwapPayload(swap=swap))


@router.put("/{swap_id}/status", response_model=ApiResponse[SwapPayload])
@limiter.limit("30/minute")
async def update_swap_status(
    request: Request,
    swap_id: str,
    payload: SwapStatusUpdate,
    current_user: dict = Depends(get_current_user),
    swaps: SwapStore = Depends(get_swap_store),
    users: UserStore = Depends(get_user_store),
):
    """
    Move a swap to a new status. Either participant may do so.

    Completing a swap awards both participants. The previous status is not
    checked, so completing an already completed swap awards again.
    """
    try:
        swap = await swaps.update_status(swap_id, payload.status, current_user["id"])
        if not swap:
            raise NotFoundError("Swap not found or you do not have permission to update it")

        if payload.status == "completed":
            for participant_id in (swap["requester_id"], swap["owner_id"]):
                await users.add_points(participant_id, config.SWAP_COMPLETED_POINTS)
            logger.info(f"Swap {swap_id} completed, awarded {config.SWAP_COMPLETED_POINTS} points to both parties")
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error updating swap {swap_id}: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Failed to update swap status", e)

    return ApiResponse[SwapPayload](message="Swap status updated successfully", data=SwapPayload(swap=swap))
