"""
Page controllers.

A controller fetches from the API, renders fragments into the Page and
reports outcomes as notifications. Authorization lives on the server; the
controllers only react to what the server answers.
"""

import logging
from dataclasses import dataclass, field

from urbanswap.client import templates
from urbanswap.client.api import ApiClient, ApiError, AuthAPI, ListingsAPI, SwapsAPI

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login.html"
MIN_SEARCH_LENGTH = 2


@dataclass
class Page:
    """What a browser page would show: named containers, toasts and a pending redirect."""

    path: str = "/index.html"
    query: dict = field(default_factory=dict)
    containers: dict = field(default_factory=dict)
    notifications: list = field(default_factory=list)
    redirect_to: str | None = None

    def render(self, container: str, html: str) -> None:
        self.containers[container] = html

    def notify(self, message: str, kind: str = "info") -> None:
        self.notifications.append((message, kind))

    def redirect(self, path: str) -> None:
        self.redirect_to = path

    @property
    def last_notification(self) -> tuple | None:
        return self.notifications[-1] if self.notifications else None


class Controller:
    def __init__(self, page: Page, client: ApiClient):
        self.page = page
        self.client = client
        self.auth = AuthAPI(client)
        self.listings = ListingsAPI(client)
        self.swaps = SwapsAPI(client)

    def handle_error(self, error: Exception, default_message: str = "An error occurred") -> None:
        logger.warning(f"{default_message}: {error}")
        if isinstance(error, ApiError) and error.is_auth_error:
            self.client.session.clear()
            self.page.redirect(LOGIN_PAGE)
            return
        self.page.notify(getattr(error, "message", None) or default_message, "error")

    def require_auth(self) -> bool:
        if not self.auth.is_authenticated():
            self.page.notify("Please login to access this page", "warning")
            self.page.redirect(LOGIN_PAGE)
            return False
        return True


class NavigationController(Controller):
    def update(self) -> str:
        html = templates.nav_links(self.page.path, self.auth.is_authenticated())
        self.page.render("main-nav", html)
        return html


class AuthController(Controller):
    async def login(self, email: str, password: str) -> bool:
        try:
            await self.auth.login({"email": email, "password": password})
        except ApiError as error:
            # A failed login is a 401 too, but it should not bounce to the login page
            self.page.notify(error.message or "Login failed", "error")
            return False
        self.page.notify("Login successful!", "success")
        self.page.redirect("/index.html")
        return True

    async def register(self, user_data: dict) -> bool:
        try:
            await self.auth.register(user_data)
        except ApiError as error:
            self.handle_error(error, "Registration failed")
            return False
        self.page.notify("Registration successful!", "success")
        self.page.redirect("/index.html")
        return True

    def logout(self) -> None:
        self.auth.logout()
        self.page.notify("Logged out successfully", "success")
        self.page.redirect("/")


class ListingsController(Controller):
    async def load_page(self) -> None:
        """Render whatever the current path shows."""
        path = self.page.path
        category = templates.CATEGORY_PAGES.get(path)
        if category:
            await self.load_listings({"category": category})
        elif path.endswith("details.html"):
            await self.load_listing_details(self.page.query.get("id"))
        elif path in ("/", "/index.html"):
            await self.load_featured()

    async def load_listings(self, filters: dict | None = None, empty_message="No listings found in this category."):
        try:
            response = await self.listings.get_all(filters or {})
        except ApiError as error:
            self.handle_error(error, "Failed to load listings")
            return

        rows = response["data"]["listings"]
        if rows:
            html = "\n".join(templates.listing_card(listing) for listing in rows)
        else:
            html = templates.empty_state(empty_message)
        self.page.render("feed-container", html)

    async def load_featured(self, limit: int = 6) -> None:
        try:
            response = await self.listings.get_featured(limit)
        except ApiError as error:
            # Home page still works without the featured strip
            logger.warning(f"Error loading featured listings: {error}")
            return
        rows = response["data"]["listings"]
        if rows:
            self.page.render("featured-listings", "\n".join(templates.listing_card(listing) for listing in rows))

    async def load_listing_details(self, listing_id: str | None) -> dict | None:
        if not listing_id:
            self.page.redirect("/index.html")
            return None
        try:
            response = await self.listings.get_by_id(listing_id)
        except ApiError as error:
            if error.status_code == 404:
                self.page.render("listing-details-container", "<p>Listing not found.</p>")
                return None
            self.handle_error(error, "Failed to load listing details")
            return None

        listing = response["data"]["listing"]
        self.page.render("listing-details-container", templates.listing_details(listing))
        return listing

    async def search(self, query: str) -> None:
        if len(query) < MIN_SEARCH_LENGTH:
            await self.load_page()
            return
        await self.load_listings({"search": query}, empty_message="No listings found matching your search.")

    async def filter_category(self, category: str | None) -> None:
        await self.load_listings({"category": category} if category else {})

    async def create_listing(self, fields: dict, image: tuple | None = None) -> dict | None:
        if not self.auth.is_authenticated():
            self.page.notify("Please login to create a listing", "warning")
            return None
        try:
            response = await self.listings.create(fields, image)
        except ApiError as error:
            self.handle_error(error, "Failed to create listing")
            return None
        self.page.notify("Listing created successfully!", "success")
        self.page.redirect("/profile.html")
        return response["data"]["listing"]

    def open_swap_request(self, listing: dict) -> bool:
        if not self.require_auth():
            return False
        self.page.render("swap-modal", templates.swap_request_form(listing))
        return True

    async def request_swap(self, listing_id: str, offer_type: str, offer_details: str, message=None):
        if not self.require_auth():
            return None
        try:
            response = await self.swaps.create(
                {
                    "listing_id": listing_id,
                    "offer_type": offer_type,
                    "offer_details": offer_details,
                    "message": message or None,
                }
            )
        except ApiError as error:
            self.handle_error(error, "Failed to send swap request")
            return None
        self.page.containers.pop("swap-modal", None)
        self.page.notify("Swap request sent successfully!", "success")
        return response["data"]["swap"]


class ProfileController(Controller):
    async def load(self) -> bool:
        if not self.require_auth():
            return False
        try:
            profile = await self.auth.get_profile()
            self.show_profile(profile["data"]["user"])

            listings = await self.listings.get_user_listings()
            self.show_listings(listings["data"]["listings"])

            swaps = await self.swaps.get_all()
            self.show_swaps(swaps["data"]["swaps"])
        except ApiError as error:
            self.handle_error(error, "Failed to load profile data")
            return False
        return True

    def show_profile(self, user: dict) -> None:
        self.page.render("profile-summary", templates.profile_summary(user))

    def show_listings(self, listings: list) -> None:
        if not listings:
            html = templates.empty_state("You haven't created any listings yet.")
        else:
            html = "\n".join(templates.user_listing_card(listing) for listing in listings)
        self.page.render("my-listings", html)

    def show_swaps(self, swaps: list) -> None:
        if not swaps:
            html = templates.empty_state("You don't have any swaps yet.", "no-swaps")
        else:
            current_user_id = self.client.session.user_id
            html = "\n".join(templates.swap_item(swap, current_user_id) for swap in swaps)
        self.page.render("my-swaps", html)

    async def update_profile(self, full_name=None, location=None, phone=None) -> dict | None:
        fields = {"full_name": full_name, "location": location, "phone": phone}
        try:
            response = await self.auth.update_profile({k: v for k, v in fields.items() if v})
        except ApiError as error:
            self.handle_error(error, "Failed to update profile")
            return None
        user = response["data"]["user"]
        self.page.notify("Profile updated successfully!", "success")
        self.show_profile(user)
        return user

    async def delete_listing(self, listing_id: str) -> bool:
        try:
            await self.listings.delete(listing_id)
        except ApiError as error:
            self.handle_error(error, "Failed to delete listing")
            return False
        self.page.notify("Listing deleted successfully!", "success")
        await self.load()
        return True

    async def swap_action(self, swap_id: str, action: str) -> bool:
        try:
            await self.swaps.update_status(swap_id, action)
        except ApiError as error:
            self.handle_error(error, f"Failed to {action} swap")
            return False
        self.page.notify(f"Swap {action} successfully!", "success")
        await self.load()
        return True
