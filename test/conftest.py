import os

# Fast hashing and a fixed signing key, set BEFORE any imports
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENV"] = "test"
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

import itertools
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from urbanswap.api.deps import get_listing_store, get_swap_store, get_user_store
from urbanswap.main import app
from test.factories import auth_header
from test.fakes import InMemoryListingStore, InMemorySwapStore, InMemoryUserStore

_image_counter = itertools.count(1)


@pytest.fixture
def stores():
    users = InMemoryUserStore()
    listings = InMemoryListingStore(users)
    swaps = InMemorySwapStore(users, listings)
    return SimpleNamespace(users=users, listings=listings, swaps=swaps)


@pytest.fixture
def test_app(stores):
    app.dependency_overrides[get_user_store] = lambda: stores.users
    app.dependency_overrides[get_listing_store] = lambda: stores.listings
    app.dependency_overrides[get_swap_store] = lambda: stores.swaps

    # Disable rate limiting for tests
    app.state.limiter.enabled = False
    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture(autouse=True)
def fake_image_storage():
    """Mock GCS upload/delete for listing images"""
    with patch("urbanswap.api.listings.upload_listing_image", new_callable=AsyncMock) as mock_upload, patch(
        "urbanswap.api.listings.delete_image_from_storage", new_callable=AsyncMock
    ) as mock_delete:
        mock_upload.side_effect = lambda *args, **kwargs: (
            f"https://storage.googleapis.com/urbanswap-listing-images/listings/fake_{next(_image_counter)}.jpg"
        )
        mock_delete.return_value = True
        yield SimpleNamespace(upload=mock_upload, delete=mock_delete)


@pytest.fixture
def register(client):
    """Register through the API and return (user, token)."""

    async def _register(email="alice@example.com", password="secret123", full_name="Alice Doe", **extra):
        payload = {"email": email, "password": password, "full_name": full_name, "location": "Mumbai", **extra}
        response = await client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["user"], data["token"]

    return _register


@pytest.fixture
def create_listing(client):
    """Create a listing through the API as the token's user and return it."""

    async def _create(token, **fields):
        form = {
            "title": "Vintage Camera",
            "description": "A classic film camera in great condition.",
            "category": "Urban Goods",
            "location": "Navi Mumbai",
            **fields,
        }
        response = await client.post("/api/listings", data=form, headers=auth_header(token))
        assert response.status_code == 201, response.text
        return response.json()["data"]["listing"]

    return _create
