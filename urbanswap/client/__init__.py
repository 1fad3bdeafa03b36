from urbanswap.client.api import ApiClient, ApiError, AuthAPI, ListingsAPI, SwapsAPI
from urbanswap.client.controllers import (
    AuthController,
    ListingsController,
    NavigationController,
    Page,
    ProfileController,
)
from urbanswap.client.session import Session

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthAPI",
    "ListingsAPI",
    "SwapsAPI",
    "Page",
    "NavigationController",
    "AuthController",
    "ListingsController",
    "ProfileController",
    "Session",
]
