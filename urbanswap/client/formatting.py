from datetime import datetime

RUPEE = "₹"


def format_price(price: str | None) -> str:
    if not price:
        return "Negotiable"
    if "free" in price.lower():
        return "Free"
    if RUPEE not in price:
        return f"{RUPEE}{price}"
    return price


def format_date(value) -> str:
    """ISO string or datetime -> "March 5, 2025". Unparseable input comes back as is."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return f"{value:%B} {value.day}, {value.year}"


def truncate(text: str | None, length: int) -> str:
    text = text or ""
    if len(text) > length:
        return text[:length] + "..."
    return text
