import logging
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from urbanswap import config
from urbanswap.api.deps import get_user_store
from urbanswap.errors import AuthError
from urbanswap.stores import UserStore

logger = logging.getLogger(__name__)

# don't auto-fail if no header, we want our own 401 envelope
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Sign a session token carrying the user id and an expiry claim."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"userId": str(user_id), "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Verify a session token and return the user id it carries.
    Raises AuthError if token is invalid, expired or malformed
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except JWTError:
        # Don't expose token error details to user
        raise AuthError("Invalid token")

    user_id = payload.get("userId")
    if not user_id:
        raise AuthError("Invalid token payload")
    return str(user_id)


def extract_user_id(request: Request) -> str | None:
    """User id from a valid bearer token, or None. Never raises."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    try:
        return decode_access_token(auth_header.split("Bearer ", 1)[1])
    except AuthError:
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: UserStore = Depends(get_user_store),
) -> dict:
    """Resolve the authenticated user from the bearer token, or fail with 401."""
    if credentials is None:
        raise AuthError("Access token required")

    user_id = decode_access_token(credentials.credentials)
    user = await users.find_by_id(user_id)
    if not user:
        raise AuthError("Invalid token: user not found")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: UserStore = Depends(get_user_store),
) -> dict | None:
    """Like get_current_user, but anonymous or bad tokens just yield None."""
    if credentials is None:
        return None
    try:
        user_id = decode_access_token(credentials.credentials)
    except AuthError:
        return None
    return await users.find_by_id(user_id)
