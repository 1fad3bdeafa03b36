"""
Client side session.

One Session per client instance holds the token the server issued. Expiry is
checked locally from the token's exp claim so a stale token is dropped
without a round trip; the server still verifies every request.
"""

import time

from jose import JWTError, jwt


class Session:
    def __init__(self, token: str | None = None):
        self.token = token

    def set(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None

    def claims(self) -> dict | None:
        """Token payload without signature verification, or None if unreadable."""
        if not self.token:
            return None
        try:
            return jwt.get_unverified_claims(self.token)
        except JWTError:
            return None

    def is_valid(self, now: float | None = None) -> bool:
        claims = self.claims()
        if not claims or "exp" not in claims:
            return False
        current = time.time() if now is None else now
        try:
            return float(claims["exp"]) > current
        except (TypeError, ValueError):
            return False

    @property
    def user_id(self) -> str | None:
        if not self.is_valid():
            return None
        user_id = self.claims().get("userId")
        return str(user_id) if user_id else None
