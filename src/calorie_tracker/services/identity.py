"""Bearer-token authentication against the identity provider."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class AuthenticationError(Exception):
    """Raised when a request carries no valid access token."""


class IdentityClient(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a token, or None if it is invalid."""


@dataclass
class IdentityService:
    """Resolves Authorization headers to user ids."""

    client: IdentityClient

    def authenticate(self, authorization: str | None) -> UUID:
        """Return the caller's user id or raise AuthenticationError."""
        if not authorization:
            raise AuthenticationError("Missing Authorization header")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Expected a Bearer token")
        user_id = self.client.get_user_id(token.strip())
        if user_id is None:
            raise AuthenticationError("Invalid or expired token")
        return user_id
