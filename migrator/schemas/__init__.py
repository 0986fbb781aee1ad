"""Schemas package."""

from migrator.schemas.report import (
    CopyResult,
    SampleCheck,
    UserFailure,
    UserMigrationResult,
    ValidationReport,
    VerificationReport,
)
from migrator.schemas.state import MigrationState, Phase
from migrator.schemas.table import ColumnInfo, SchemaDiff, TableSchema
from migrator.schemas.user import SourceUser, UserIdMapping

__all__ = [
    "SourceUser",
    "UserIdMapping",
    "MigrationState",
    "Phase",
    "ValidationReport",
    "UserFailure",
    "UserMigrationResult",
    "CopyResult",
    "SampleCheck",
    "VerificationReport",
    "ColumnInfo",
    "TableSchema",
    "SchemaDiff",
]
