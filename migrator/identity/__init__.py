"""Identity providers package."""

from migrator.identity.base import AlreadyExists, Created, CreateFailed, CreateUserResult, IdentityProvider
from migrator.identity.supabase_provider import SupabaseIdentityProvider

__all__ = [
    "IdentityProvider",
    "SupabaseIdentityProvider",
    "CreateUserResult",
    "Created",
    "AlreadyExists",
    "CreateFailed",
]
