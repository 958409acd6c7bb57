"""Supabase Auth implementation of the identity client."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from calorie_tracker.services.identity import IdentityClient


@dataclass
class SupabaseIdentityClient(IdentityClient):
    """Validates access tokens with Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the Supabase user id for an access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError:
            return None
        user = getattr(response, "user", None)
        if user is None or not user.id:
            return None
        return UUID(str(user.id))
