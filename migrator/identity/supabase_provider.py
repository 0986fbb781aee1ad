"""Supabase Auth admin adapter."""

import asyncio
from typing import Any

import structlog
from supabase import Client, ClientOptions, create_client

from migrator.identity.base import AlreadyExists, Created, CreateFailed, CreateUserResult, IdentityProvider
from migrator.schemas.user import SourceUser

logger = structlog.get_logger(__name__)

# Provider error texts and codes that mean "this email is taken"
ALREADY_EXISTS_MARKERS = ("already been registered", "already exists")
ALREADY_EXISTS_CODES = frozenset({"email_exists", "user_already_exists"})

MIGRATED_FROM = "neon_authjs"


def build_user_attributes(user: SourceUser) -> dict[str, Any]:
    """Build the admin `create_user` payload for a legacy user.

    Email is marked confirmed only if the legacy account had verified it.
    """
    return {
        "email": user.email,
        "email_confirm": user.is_verified,
        "user_metadata": {
            "name": user.name,
            "full_name": user.name,
            "avatar_url": user.image,
            "legacy_id": user.id,
            "legacy_role": user.role,
            "profile_complete": user.profile_complete,
            "migrated_from": MIGRATED_FROM,
            "created_at_original": user.created_at.isoformat() if user.created_at else None,
        },
        "app_metadata": {
            "provider": "google",
            "providers": ["google"],
        },
    }


def classify_create_error(error: Exception) -> AlreadyExists | CreateFailed:
    """Map a raw provider error onto the creation result variants."""
    message = getattr(error, "message", None) or str(error)
    code = getattr(error, "code", None)

    if code in ALREADY_EXISTS_CODES or any(marker in message for marker in ALREADY_EXISTS_MARKERS):
        return AlreadyExists(message)
    return CreateFailed(message)


class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by the Supabase Auth admin API.

    The supabase client is synchronous; calls run in a worker thread so the
    database pools keep their event loop.
    """

    def __init__(self, client: Client, page_size: int = 1000):
        self.client = client
        self.page_size = page_size

    @classmethod
    def from_credentials(cls, url: str, service_role_key: str, page_size: int = 1000) -> "SupabaseIdentityProvider":
        """Create an admin client from the project URL and service role key."""
        client = create_client(
            url,
            service_role_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
        return cls(client, page_size=page_size)

    @property
    def _admin(self):
        return self.client.auth.admin

    async def create_user(self, user: SourceUser) -> CreateUserResult:
        try:
            response = await asyncio.to_thread(self._admin.create_user, build_user_attributes(user))
        except Exception as e:
            return classify_create_error(e)

        if response is None or response.user is None:
            return CreateFailed("Provider returned no user")
        return Created(str(response.user.id))

    async def find_user_id_by_email(self, email: str) -> str | None:
        target = email.lower()
        page = 1
        while True:
            users = await asyncio.to_thread(self._admin.list_users, page=page, per_page=self.page_size)
            for candidate in users:
                if (candidate.email or "").lower() == target:
                    return str(candidate.id)
            if len(users) < self.page_size:
                return None
            page += 1

    async def user_exists(self, user_id: str) -> bool:
        try:
            response = await asyncio.to_thread(self._admin.get_user_by_id, user_id)
        except Exception as e:
            if getattr(e, "status", None) == 404:
                return False
            raise
        return response is not None and response.user is not None
