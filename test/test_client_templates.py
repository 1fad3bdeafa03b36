from datetime import datetime

import pytest

from urbanswap.client import templates
from urbanswap.client.formatting import format_date, format_price, truncate


@pytest.mark.parametrize(
    "price, expected",
    [
        (None, "Negotiable"),
        ("", "Negotiable"),
        ("Free to a good home", "Free"),
        ("500", "₹500"),
        ("₹1,200", "₹1,200"),
    ],
)
def test_format_price(price, expected):
    assert format_price(price) == expected


def test_format_date():
    assert format_date("2025-03-05T10:00:00Z") == "March 5, 2025"
    assert format_date(datetime(2024, 12, 25)) == "December 25, 2024"
    assert format_date(None) == ""
    assert format_date("someday") == "someday"


def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("a" * 12, 10) == "a" * 10 + "..."
    assert truncate(None, 10) == ""


def listing(**overrides):
    return {
        "id": "l-1",
        "user_id": "u-1",
        "title": "Vintage Camera",
        "description": "A classic film camera in great condition.",
        "category": "Skills Exchange",
        "location": "Mumbai",
        "price": "500",
        "swap_preferences": None,
        "image_url": None,
        "status": "active",
        "created_at": "2025-03-05T10:00:00Z",
        "owner": {"id": "u-1", "full_name": "Alice Doe", "avatar_url": None, "location": "Mumbai"},
        **overrides,
    }


def test_listing_card_escapes_user_content():
    html = templates.listing_card(listing(title='<script>alert("x")</script>'))

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_listing_card_uses_category_color_and_placeholder():
    html = templates.listing_card(listing())

    assert "#e74c3c" in html
    assert "https://via.placeholder.com/400x200?text=Vintage+Camera" in html
    assert "₹500" in html
    assert 'href="/details.html?id=l-1"' in html


def test_listing_details_shows_preferences_only_when_set():
    assert "Swap Preferences" not in templates.listing_details(listing())

    html = templates.listing_details(listing(swap_preferences="Books"))
    assert "<strong>Swap Preferences:</strong> Books" in html
    assert "Alice Doe" in html


def test_user_listing_card_status_badge():
    html = templates.user_listing_card(listing(status="inactive"))

    assert 'class="listing-status status-inactive"' in html
    assert "March 5, 2025" in html


def swap(**overrides):
    return {
        "id": "s-1",
        "listing_id": "l-1",
        "requester_id": "bob",
        "owner_id": "alice",
        "offer_type": "item",
        "offer_details": "My bicycle",
        "message": None,
        "status": "pending",
        "created_at": "2025-03-05T10:00:00Z",
        "requester": {"id": "bob", "full_name": "Bob Roe"},
        "owner": {"id": "alice", "full_name": "Alice Doe"},
        "listing": {"id": "l-1", "title": "Vintage Camera"},
        **overrides,
    }


def test_swap_actions_depend_on_role_and_status():
    assert "btn-accept" in templates.swap_actions(swap(), "alice")
    assert "btn-reject" in templates.swap_actions(swap(), "alice")
    assert "btn-cancel" in templates.swap_actions(swap(), "bob")
    assert "btn-complete" in templates.swap_actions(swap(status="accepted"), "bob")
    assert templates.swap_actions(swap(status="completed"), "alice") == ""
    assert templates.swap_actions(swap(), "carol") == ""


def test_swap_item_role_relative_to_current_user():
    as_requester = templates.swap_item(swap(), "bob")
    as_owner = templates.swap_item(swap(message="Hi there"), "alice")

    assert "Requested: Vintage Camera" in as_requester
    assert "With: Alice Doe" in as_requester
    assert "Received request for: Vintage Camera" in as_owner
    assert "With: Bob Roe" in as_owner
    assert '"Hi there"' in as_owner


def test_nav_links():
    guest = templates.nav_links("/urban-goods.html", authenticated=False)
    member = templates.nav_links("/profile.html", authenticated=True)

    assert '<a href="/urban-goods.html" class="active">Urban Goods</a>' in guest
    assert "Login" in guest and "Logout" not in guest
    assert '<a href="/profile.html" class="active">Profile</a>' in member
    assert "Post Swap" in member and "Login" not in member
