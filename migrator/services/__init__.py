"""Migration phase services."""

from migrator.services.copy_service import TableCopier, TableCopySpec
from migrator.services.schema_service import SchemaCopyService, diff_schemas
from migrator.services.user_migration_service import UserMigrationService
from migrator.services.validation_service import ValidationService
from migrator.services.verification_service import VerificationService

__all__ = [
    "ValidationService",
    "UserMigrationService",
    "TableCopier",
    "TableCopySpec",
    "SchemaCopyService",
    "diff_schemas",
    "VerificationService",
]
