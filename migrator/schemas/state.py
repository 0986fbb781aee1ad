"""Checkpoint state schemas."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from migrator.schemas.user import UserIdMapping


class Phase(StrEnum):
    """Pipeline stages, in execution order."""

    USERS = "users"
    ORGS = "orgs"
    EVENTS = "events"
    MEMBERS = "members"
    VOLUNTEERS = "volunteers"
    CONTACTS = "contacts"
    SIGNUPS = "signups"
    GROUPCHATS = "groupchats"
    RATINGS = "ratings"
    TIMEENTRIES = "timeentries"
    MESSAGES = "messages"
    COMPLETE = "complete"

    @property
    def position(self) -> int:
        """Index of this phase in the pipeline order."""
        return list(Phase).index(self)


class MigrationState(BaseModel):
    """Durable recovery anchor written to the checkpoint file.

    Serialized with camelCase keys:
    `{"phase": ..., "userMapping": {oldId: {...}}, "lastProcessedUserIndex": n}`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    phase: Phase = Phase.USERS
    user_mapping: dict[str, UserIdMapping] = Field(default_factory=dict)
    last_processed_user_index: int = Field(default=0, ge=0)

    def advance(self, phase: Phase, **updates) -> "MigrationState":
        """Return a copy of this state at a new phase."""
        return self.model_copy(update={"phase": phase, **updates})

    def to_json(self) -> str:
        """Serialize for the checkpoint file."""
        return self.model_dump_json(by_alias=True, indent=2)
