import logging

from fastapi import APIRouter, Depends, Request

from urbanswap.api.deps import get_user_store
from urbanswap.errors import AppError, AuthError, NotFoundError, unexpected
from urbanswap.middleware.auth import create_access_token, get_current_user
from urbanswap.middleware.rate_limit import limiter
from urbanswap.models import ApiResponse, AuthPayload, UserLogin, UserPayload, UserRegister, UserUpdate
from urbanswap.stores import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201, response_model=ApiResponse[AuthPayload])
@limiter.limit("10/hour")
async def register(
    request: Request,
    payload: UserRegister,
    users: UserStore = Depends(get_user_store),
):
    """
    Create an account and sign the user in.

    Returns the public profile and a session token. A taken email is a 400.
    """
    try:
        user = await users.create(
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
            location=payload.location,
            phone=payload.phone,
        )
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error registering user: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Registration failed", e)

    logger.info(f"Registered user {user['id']}")
    return ApiResponse[AuthPayload](
        message="User registered successfully",
        data=AuthPayload(user=user, token=create_access_token(user["id"])),
    )


@router.post("/login", response_model=ApiResponse[AuthPayload])
@limiter.limit("20/15minutes")
async def login(
    request: Request,
    payload: UserLogin,
    users: UserStore = Depends(get_user_store),
):
    try:
        user = await users.find_by_email(payload.email)
        valid = user is not None and await users.verify_password(payload.password, user.get("password_hash"))
    except Exception as e:
        logger.error(f"Error during login: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Login failed", e)

    # Same answer for unknown email and wrong password
    if not valid:
        raise AuthError("Invalid email or password")

    logger.info(f"User {user['id']} logged in")
    return ApiResponse[AuthPayload](
        message="Login successful",
        data=AuthPayload(user=user, token=create_access_token(user["id"])),
    )


@router.get("/profile", response_model=ApiResponse[UserPayload])
@limiter.limit("100/minute")
async def get_profile(request: Request, current_user: dict = Depends(get_current_user)):
    return ApiResponse[UserPayload](data=UserPayload(user=current_user))


@router.put("/profile", response_model=ApiResponse[UserPayload])
@limiter.limit("10/minute")
async def update_profile(
    request: Request,
    payload: UserUpdate,
    current_user: dict = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
):
    fields = payload.model_dump(exclude_none=True)
    logger.info(f"Updating user {current_user['id']} with fields: {list(fields.keys())}")

    try:
        user = await users.update_profile(current_user["id"], fields)
    except Exception as e:
        logger.error(f"Error updating user {current_user['id']}: {type(e).__name__}: {str(e)}", exc_info=True)
        raise unexpected("Failed to update profile", e)

    if not user:
        raise NotFoundError("User not found")

    return ApiResponse[UserPayload](message="Profile updated successfully", data=UserPayload(user=user))
