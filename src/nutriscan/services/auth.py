"""Access token verification."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class TokenVerifier(Protocol):
    """Interface for resolving an access token to a user id."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, else None."""


@dataclass
class AuthService:
    """Resolves bearer tokens to users."""

    verifier: TokenVerifier

    def authenticate(self, authorization: str | None) -> UUID | None:
        """Return the user id for an Authorization header value."""
        if not authorization:
            return None
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return self.verifier.get_user_id(token.strip())
