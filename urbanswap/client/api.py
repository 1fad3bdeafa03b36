"""
Async HTTP client for the UrbanSwap REST API.

Every call returns the decoded success envelope; any non-2xx answer is
raised as ApiError carrying the server's message and status code.
"""

import logging

import httpx

from urbanswap.client.session import Session

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None, errors: list[str] | None = None, code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        self.code = code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Session | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or Session()
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(20.0, connect=5.0))

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict:
        # Expired tokens are not sent at all
        if self.session.is_valid():
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def request(self, method: str, endpoint: str, **kwargs) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as exc:
            logger.error(f"API request failed: {method} {url}: {exc}")
            raise ApiError("Network error, please try again") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            raise ApiError(
                data.get("message") or "Request failed",
                status_code=response.status_code,
                errors=data.get("errors"),
                code=data.get("code"),
            )
        return data

    async def get(self, endpoint: str, params: dict | None = None) -> dict:
        params = {key: value for key, value in (params or {}).items() if value not in (None, "")}
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: dict) -> dict:
        return await self.request("POST", endpoint, json=data)

    async def put(self, endpoint: str, data: dict) -> dict:
        return await self.request("PUT", endpoint, json=data)

    async def delete(self, endpoint: str) -> dict:
        return await self.request("DELETE", endpoint)

    async def send_form(self, method: str, endpoint: str, fields: dict, image: tuple | None = None) -> dict:
        """
        Multipart request for listing forms.
        image is an httpx file tuple: (filename, content, content_type).
        """
        data = {key: str(value) for key, value in fields.items() if value is not None}
        files = {"image": image} if image else None
        return await self.request(method, endpoint, data=data, files=files)


class AuthAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def register(self, user_data: dict) -> dict:
        response = await self.client.post("/auth/register", user_data)
        if response.get("success") and response["data"].get("token"):
            self.client.session.set(response["data"]["token"])
        return response

    async def login(self, credentials: dict) -> dict:
        response = await self.client.post("/auth/login", credentials)
        if response.get("success") and response["data"].get("token"):
            self.client.session.set(response["data"]["token"])
        return response

    def logout(self) -> None:
        self.client.session.clear()

    async def get_profile(self) -> dict:
        return await self.client.get("/auth/profile")

    async def update_profile(self, profile_data: dict) -> dict:
        return await self.client.put("/auth/profile", profile_data)

    def is_authenticated(self) -> bool:
        return self.client.session.is_valid()


class ListingsAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get_all(self, filters: dict | None = None) -> dict:
        return await self.client.get("/listings", filters)

    async def get_by_id(self, listing_id: str) -> dict:
        return await self.client.get(f"/listings/{listing_id}")

    async def get_featured(self, limit: int = 6) -> dict:
        return await self.client.get("/listings/featured", {"limit": limit})

    async def get_user_listings(self) -> dict:
        return await self.client.get("/listings/user/my-listings")

    # Listing writes are always multipart, with or without an image
    async def create(self, listing_data: dict, image: tuple | None = None) -> dict:
        return await self.client.send_form("POST", "/listings", listing_data, image)

    async def update(self, listing_id: str, listing_data: dict, image: tuple | None = None) -> dict:
        return await self.client.send_form("PUT", f"/listings/{listing_id}", listing_data, image)

    async def delete(self, listing_id: str) -> dict:
        return await self.client.delete(f"/listings/{listing_id}")


class SwapsAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get_all(self) -> dict:
        return await self.client.get("/swaps")

    async def get_by_id(self, swap_id: str) -> dict:
        return await self.client.get(f"/swaps/{swap_id}")

    async def create(self, swap_data: dict) -> dict:
        return await self.client.post("/swaps", swap_data)

    async def update_status(self, swap_id: str, status: str) -> dict:
        return await self.client.put(f"/swaps/{swap_id}/status", {"status": status})
