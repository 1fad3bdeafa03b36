"""
HTML fragments for the UrbanSwap pages.

Every value coming from the API is escaped before it is placed in markup.
"""

from html import escape
from urllib.parse import quote_plus

from urbanswap.client.formatting import format_date, format_price, truncate

CATEGORY_COLORS = {
    "Urban Goods": "#3498db",
    "Skills Exchange": "#e74c3c",
    "Community Hub": "#f1c40f",
}
DEFAULT_COLOR = "#3498db"

PLACEHOLDER = "https://via.placeholder.com/{size}?text={text}"

NAV_LINKS = [
    ("Home", "/index.html"),
    ("Urban Goods", "/urban-goods.html"),
    ("Skills Exchange", "/skills-exchange.html"),
    ("Community Hub", "/community-hub.html"),
]

CATEGORY_PAGES = {
    "/urban-goods.html": "Urban Goods",
    "/skills-exchange.html": "Skills Exchange",
    "/community-hub.html": "Community Hub",
}

OFFER_TYPES = [("item", "Item"), ("service", "Service"), ("money", "Money"), ("experience", "Experience")]


def placeholder(size: str, text: str) -> str:
    return PLACEHOLDER.format(size=size, text=quote_plus(text or ""))


def _e(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def nav_links(path: str, authenticated: bool) -> str:
    links = list(NAV_LINKS)
    if authenticated:
        links += [("Profile", "/profile.html"), ("Post Swap", "/post.html"), ("Logout", "#logout")]
    else:
        links.append(("Login", "/login.html"))

    parts = []
    for text, href in links:
        active = ' class="active"' if href.startswith("/") and path.endswith(href[1:]) else ""
        parts.append(f'<a href="{_e(href)}"{active}>{_e(text)}</a>')
    return "\n".join(parts)


def listing_card(listing: dict) -> str:
    color = CATEGORY_COLORS.get(listing.get("category"), DEFAULT_COLOR)
    image_url = listing.get("image_url") or placeholder("400x200", listing.get("title"))
    return f"""
<div class="card" data-id="{_e(listing['id'])}">
  <img src="{_e(image_url)}" alt="{_e(listing.get('title'))}" class="card-image">
  <div class="card-content">
    <div>
      <h3 class="card-title">{_e(listing.get('title'))}</h3>
      <p class="card-description">{_e(truncate(listing.get('description'), 100))}</p>
    </div>
    <div class="card-meta">
      <span>{_e(listing.get('location'))}</span>
      <span class="card-price">{_e(format_price(listing.get('price')))}</span>
    </div>
    <a href="/details.html?id={_e(listing['id'])}" class="swap-button" style="background-color: {color};">View Details</a>
  </div>
</div>"""


def listing_details(listing: dict) -> str:
    owner = listing.get("owner") or {}
    owner_name = owner.get("full_name") or ""
    owner_photo = owner.get("avatar_url") or placeholder("100x100", owner_name[:1] or "U")
    image_url = listing.get("image_url") or placeholder("800x600", listing.get("title"))

    preferences = ""
    if listing.get("swap_preferences"):
        preferences = (
            f'<div class="swap-preferences"><strong>Swap Preferences:</strong> '
            f"{_e(listing['swap_preferences'])}</div>"
        )

    return f"""
<img src="{_e(image_url)}" alt="{_e(listing.get('title'))}" class="listing-image">
<div class="details-content">
  <h1 class="details-title">{_e(listing.get('title'))}</h1>
  <p class="details-category-location">
    <span>{_e(listing.get('category'))}</span> | <span>{_e(listing.get('location'))}</span>
  </p>
  <div class="details-price"><strong>Price: {_e(format_price(listing.get('price')))}</strong></div>
  <p class="details-description">{_e(listing.get('description'))}</p>
  {preferences}
  <div class="owner-profile">
    <img src="{_e(owner_photo)}" alt="{_e(owner_name)}" class="owner-photo">
    <div>
      <strong>Owner:</strong> <span class="owner-name">{_e(owner_name)}</span>
      <div class="owner-location">{_e(owner.get('location'))}</div>
    </div>
  </div>
  <div class="action-buttons">
    <button class="action-button request-swap-btn" data-listing-id="{_e(listing['id'])}">Request Swap</button>
    <button class="action-button message-owner-btn" data-owner-id="{_e(listing.get('user_id'))}">Message Owner</button>
  </div>
</div>"""


def swap_request_form(listing: dict) -> str:
    options = "\n".join(f'      <option value="{value}">{label}</option>' for value, label in OFFER_TYPES)
    return f"""
<div class="modal">
  <h2>Request Swap</h2>
  <p>Send a swap request for: <strong>{_e(listing.get('title'))}</strong></p>
  <form id="swap-request-form" data-listing-id="{_e(listing['id'])}">
    <select id="offer-type" name="offer_type" required>
      <option value="">Select offer type</option>
{options}
    </select>
    <textarea id="offer-details" name="offer_details" rows="3" required></textarea>
    <textarea id="swap-message" name="message" rows="3"></textarea>
    <button type="submit" class="modal-btn btn-primary">Send Request</button>
  </form>
</div>"""


def user_listing_card(listing: dict) -> str:
    status = listing.get("status") or "active"
    image_url = listing.get("image_url") or placeholder("200x150", listing.get("title"))
    listing_id = _e(listing["id"])
    return f"""
<div class="user-listing-card">
  <div class="listing-image">
    <img src="{_e(image_url)}" alt="{_e(listing.get('title'))}">
    <div class="listing-status status-{_e(status.lower())}">{_e(status)}</div>
  </div>
  <div class="listing-content">
    <h4>{_e(listing.get('title'))}</h4>
    <p>{_e(truncate(listing.get('description'), 80))}</p>
    <div class="listing-meta">
      <span>{_e(listing.get('category'))}</span>
      <span>{_e(format_date(listing.get('created_at')))}</span>
    </div>
    <div class="listing-actions">
      <button class="btn-edit" data-id="{listing_id}">Edit</button>
      <button class="btn-delete" data-id="{listing_id}">Delete</button>
      <a href="/details.html?id={listing_id}" class="btn-view">View</a>
    </div>
  </div>
</div>"""


def swap_actions(swap: dict, current_user_id: str | None) -> str:
    """Buttons the current user may press for this swap."""
    swap_id = _e(swap["id"])
    status = swap.get("status")

    if status == "pending":
        if swap.get("owner_id") == current_user_id:
            return (
                f'<button class="btn-accept" data-swap-id="{swap_id}" data-action="accepted">Accept</button>'
                f'<button class="btn-reject" data-swap-id="{swap_id}" data-action="rejected">Reject</button>'
            )
        if swap.get("requester_id") == current_user_id:
            return f'<button class="btn-cancel" data-swap-id="{swap_id}" data-action="cancelled">Cancel</button>'
    elif status == "accepted":
        return f'<button class="btn-complete" data-swap-id="{swap_id}" data-action="completed">Mark Complete</button>'
    return ""


def swap_item(swap: dict, current_user_id: str | None) -> str:
    is_requester = swap.get("requester_id") == current_user_id
    other = (swap.get("owner") if is_requester else swap.get("requester")) or {}
    role = "Requested" if is_requester else "Received request for"
    listing = swap.get("listing") or {}
    status = swap.get("status") or "pending"

    message = f'<div class="swap-message">"{_e(swap["message"])}"</div>' if swap.get("message") else ""

    return f"""
<div class="list-item swap-item" data-swap-id="{_e(swap['id'])}">
  <div class="swap-details">
    <div class="swap-title"><strong>{role}: {_e(listing.get('title'))}</strong></div>
    <div class="swap-meta">
      <span>With: {_e(other.get('full_name'))}</span>
      <span>Offer: {_e(swap.get('offer_type'))} - {_e(swap.get('offer_details'))}</span>
      <span>Date: {_e(format_date(swap.get('created_at')))}</span>
    </div>
    {message}
  </div>
  <div class="swap-actions">
    <span class="swap-status status-{_e(status.lower())}">{_e(status)}</span>
    {swap_actions(swap, current_user_id)}
  </div>
</div>"""


def profile_summary(user: dict) -> str:
    name = user.get("full_name") or ""
    photo = user.get("avatar_url") or placeholder("150x150", name[:1])
    return f"""
<img src="{_e(photo)}" alt="{_e(name)}" class="profile-photo">
<h2 class="username">{_e(name)}</h2>
<p class="bio">Member since {_e(format_date(user.get('created_at')))} • {_e(user.get('location'))}</p>
<span id="user-points">{_e(user.get('points') or 0)}</span>"""


def empty_state(message: str, css_class: str = "no-listings") -> str:
    return f'<p class="{css_class}">{_e(message)}</p>'
