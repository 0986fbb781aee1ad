"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SourceUser(BaseModel):
    """A row of the legacy Neon `User` table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str | None = None
    email: str
    email_verified: datetime | None = None
    image: str | None = None
    role: str | None = None
    profile_complete: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_verified(self) -> bool:
        """Whether the legacy account had a verified email."""
        return self.email_verified is not None


class UserIdMapping(BaseModel):
    """Legacy user id mapped to the Supabase Auth user id.

    Immutable once created; at most one per `old_id`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    old_id: str = Field(min_length=1)
    new_id: str = Field(min_length=1)
    email: str
    name: str | None = None
    image: str | None = None

    @classmethod
    def for_user(cls, user: SourceUser, new_id: str) -> "UserIdMapping":
        """Build the mapping for a migrated source user."""
        return cls(
            old_id=user.id,
            new_id=new_id,
            email=user.email,
            name=user.name,
            image=user.image,
        )
