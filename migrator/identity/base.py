"""Identity provider abstraction layer.

Defines the admin operations the migration needs from the destination auth
system and the tagged result of a user creation attempt, so that callers
never inspect provider error text themselves.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from migrator.schemas.user import SourceUser


@dataclass(frozen=True)
class Created:
    """The provider created a new user."""

    user_id: str


@dataclass(frozen=True)
class AlreadyExists:
    """The provider already has a user with this email."""

    message: str


@dataclass(frozen=True)
class CreateFailed:
    """Creation failed for any other reason."""

    message: str


CreateUserResult = Created | AlreadyExists | CreateFailed


class IdentityProvider(ABC):
    """Admin operations on the destination identity system."""

    @abstractmethod
    async def create_user(self, user: SourceUser) -> CreateUserResult:
        """Create an identity for a legacy user.

        Never raises for provider-side rejections; those come back as
        `AlreadyExists` or `CreateFailed`.
        """
        pass

    @abstractmethod
    async def find_user_id_by_email(self, email: str) -> str | None:
        """Look up an existing identity by email.

        Returns:
            The provider's user id, or None if no user has this email
        """
        pass

    @abstractmethod
    async def user_exists(self, user_id: str) -> bool:
        """Check whether the provider can resolve `user_id`."""
        pass
