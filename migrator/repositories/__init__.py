"""Repository package for data access."""

from migrator.repositories.schema_repo import SchemaRepository
from migrator.repositories.source_repo import SourceRepository
from migrator.repositories.target_repo import TargetRepository

__all__ = [
    "SourceRepository",
    "TargetRepository",
    "SchemaRepository",
]
