"""Schema-comparing copier for the plain Neon to Supabase data migration.

Both schemas are read at runtime and each table is copied using only the
columns present on both sides. Columns found on one side only are reported
as warnings, never as failures.
"""

from dataclasses import dataclass, field

import asyncpg
import structlog
from tqdm import tqdm

from migrator.repositories.schema_repo import SchemaRepository
from migrator.repositories.source_repo import SourceRepository
from migrator.repositories.target_repo import TargetRepository
from migrator.schemas.table import SchemaDiff, TableSchema

logger = structlog.get_logger(__name__)

# Foreign key order; truncation runs in reverse
GENERIC_TABLE_ORDER = (
    "NotificationPreference",
    "Volunteer",
    "Organization",
    "OrganizationMember",
    "OrganizationContact",
    "OrganizationJoinRequest",
    "SignupIntent",
    "Event",
    "EventSignup",
    "EventRating",
    "TimeEntry",
    "GroupChat",
    "ChatMessage",
)


def diff_schemas(source: TableSchema, target: TableSchema) -> SchemaDiff:
    """Compare one table's columns across the two databases.

    `common` keeps the source column order.
    """
    source_names = source.column_names
    target_names = target.column_names
    target_set = set(target_names)
    source_set = set(source_names)

    target_types = {col.name: col.data_type for col in target.columns}
    mismatches = tuple(
        (col.name, col.data_type, target_types[col.name])
        for col in source.columns
        if col.name in target_types and col.data_type != target_types[col.name]
    )

    return SchemaDiff(
        table=source.name,
        common=tuple(name for name in source_names if name in target_set),
        missing_in_target=tuple(name for name in source_names if name not in target_set),
        missing_in_source=tuple(name for name in target_names if name not in source_set),
        type_mismatches=mismatches,
    )


@dataclass
class SchemaComparison:
    """Per-table schemas on both sides and the drift between them."""

    source: dict[str, TableSchema] = field(default_factory=dict)
    target: dict[str, TableSchema] = field(default_factory=dict)
    diffs: dict[str, SchemaDiff] = field(default_factory=dict)
    differences: list[str] = field(default_factory=list)


def describe_differences(table: str, source: TableSchema | None, target: TableSchema | None) -> list[str]:
    """Human-readable drift lines for one table."""
    if source and not target:
        return [f'Table "{table}" exists in Neon but not in Supabase']
    if target and not source:
        return [f'Table "{table}" exists in Supabase but not in Neon']
    if not source or not target:
        return []

    diff = diff_schemas(source, target)
    lines = []
    if diff.missing_in_target:
        lines.append(f'Table "{table}": Columns in Neon but not Supabase: {", ".join(diff.missing_in_target)}')
    if diff.missing_in_source:
        lines.append(f'Table "{table}": Columns in Supabase but not Neon: {", ".join(diff.missing_in_source)}')
    for name, source_type, target_type in diff.type_mismatches:
        lines.append(f'Table "{table}": Column "{name}" is {source_type} in Neon but {target_type} in Supabase')
    return lines


class SchemaCopyService:
    """Copies tables by column intersection."""

    def __init__(
        self,
        source_schema: SchemaRepository,
        target_schema: SchemaRepository,
        source: SourceRepository,
        target: TargetRepository,
        tables: tuple[str, ...] = GENERIC_TABLE_ORDER,
        *,
        show_progress: bool = True,
    ):
        self.source_schema = source_schema
        self.target_schema = target_schema
        self.source = source
        self.target = target
        self.tables = tables
        self.show_progress = show_progress

    async def compare(self) -> SchemaComparison:
        """Read both schemas and log every difference."""
        logger.info("Comparing schemas between Neon and Supabase")
        comparison = SchemaComparison()

        for table in self.tables:
            source = await self.source_schema.get_table_schema(table)
            target = await self.target_schema.get_table_schema(table)

            if source:
                comparison.source[table] = source
            if target:
                comparison.target[table] = target
            if source and target:
                comparison.diffs[table] = diff_schemas(source, target)
                logger.info("Row counts", table=table, neon=source.row_count, supabase=target.row_count)

            comparison.differences.extend(describe_differences(table, source, target))

        if comparison.differences:
            logger.warning("Schema differences detected", count=len(comparison.differences))
            for line in comparison.differences:
                logger.warning(line)
            logger.warning("The migration will copy only the columns both schemas share")
        else:
            logger.info("Schemas match", status="ok")

        return comparison

    async def clear_target(self, comparison: SchemaComparison) -> None:
        """Truncate every destination table, children first."""
        logger.info("Clearing existing data in Supabase")
        for table in reversed(self.tables):
            if table in comparison.target:
                await self.target.truncate(table)
        logger.info("Supabase data cleared", status="ok")

    async def copy_table(self, diff: SchemaDiff) -> int:
        """Copy the shared columns of one table. Returns rows inserted."""
        table = diff.table
        logger.info("Migrating table", table=table)

        if not diff.common:
            logger.warning("No common columns, skipping", table=table)
            return 0

        rows = await self.source.fetch_rows(table, diff.common)
        if not rows:
            logger.info("No data to migrate", table=table)
            return 0

        inserted = 0
        duplicates = 0
        errors = 0
        for row in tqdm(rows, desc=f"  {table}", disable=not self.show_progress):
            try:
                status = await self.target.insert_row(
                    table,
                    diff.common,
                    [row[col] for col in diff.common],
                    on_conflict_do_nothing=True,
                )
                if status == "INSERT 0 0":
                    duplicates += 1
                else:
                    inserted += 1
            except asyncpg.UniqueViolationError:
                duplicates += 1
            except (asyncpg.PostgresError, ValueError, TypeError) as e:
                logger.warning("Error inserting row", table=table, id=row.get("id"), error=str(e))
                errors += 1

        logger.info(
            f"Migrated {inserted}/{len(rows)} rows",
            table=table,
            duplicates=duplicates,
            errors=errors,
            status="ok",
        )
        return inserted

    async def copy_all(self, comparison: SchemaComparison) -> int:
        """Copy every table present on both sides. Returns total rows inserted."""
        total = 0
        for table in self.tables:
            if table in comparison.diffs:
                total += await self.copy_table(comparison.diffs[table])
            elif table in comparison.source:
                logger.warning("Skipping table missing in Supabase", table=table)
        return total
