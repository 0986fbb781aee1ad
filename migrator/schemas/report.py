"""Phase result structures."""

from dataclasses import dataclass, field

from migrator.schemas.state import MigrationState
from migrator.schemas.user import SourceUser, UserIdMapping


@dataclass
class ValidationReport:
    """Source row counts and duplicate emails found before migrating."""

    counts: dict[str, int] = field(default_factory=dict)
    duplicate_emails: list[str] = field(default_factory=list)

    @property
    def user_count(self) -> int:
        return self.counts.get("User", 0)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_emails)


@dataclass
class UserFailure:
    """A source user whose identity could not be created or mapped."""

    user: SourceUser
    error: str


@dataclass
class UserMigrationResult:
    """Outcome of the user identity phase."""

    state: MigrationState
    created: int = 0
    mapped_existing: int = 0
    restored: int = 0
    failures: list[UserFailure] = field(default_factory=list)

    @property
    def mapping(self) -> dict[str, UserIdMapping]:
        return self.state.user_mapping


@dataclass
class CopyResult:
    """Counts for one copied table."""

    table: str
    total: int = 0
    migrated: int = 0
    skipped: int = 0  # unmapped user reference
    failed: int = 0  # insert raised


@dataclass
class SampleCheck:
    """One spot-checked user mapping."""

    email: str
    old_id: str
    new_id: str
    status: str  # "OK", "NOT FOUND" or "ERROR"
    detail: str | None = None


@dataclass
class VerificationReport:
    """Destination counts and sampled identity checks after migrating."""

    counts: dict[str, int] = field(default_factory=dict)
    mapping_count: int = 0
    samples: list[SampleCheck] = field(default_factory=list)
