from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from urbanswap import config
from urbanswap.middleware.auth import extract_user_id


def get_user_or_ip(request: Request) -> str:
    """
    Get unique identifier for rate limiting.
    User id from a valid session token, or fallback to IP.
    """
    user_id = extract_user_id(request)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


# Universal limiter: Uses user id for authenticated requests, IP for anonymous.
# Every route carries its own @limiter.limit, there is no app wide default.
limiter = Limiter(
    key_func=get_user_or_ip,
    storage_uri=config.RATE_LIMIT_STORAGE_URI,
)


def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Length of the window of the limit that was hit, e.g. 900 for "20/15minutes"."""
    return int(exc.limit.limit.get_expiry())


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    retry_seconds = _retry_after_seconds(exc)
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "code": "rate_limited",
            "message": f"Too many requests. Please try again in {retry_seconds} seconds.",
        },
        headers={"Retry-After": str(retry_seconds)},
    )
