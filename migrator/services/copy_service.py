"""Table copier shared by the entity phases."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import asyncpg
import structlog
from tqdm import tqdm

from migrator.repositories.source_repo import SourceRepository
from migrator.repositories.target_repo import TargetRepository
from migrator.schemas.report import CopyResult
from migrator.schemas.user import UserIdMapping

logger = structlog.get_logger(__name__)

Row = dict[str, Any]
Enricher = Callable[[Row, UserIdMapping | None], Row]

# Row-level insert failures (constraint violations, bad values). Connection
# loss is not in this list and aborts the phase.
ROW_ERRORS = (asyncpg.PostgresError, ValueError, TypeError)


@dataclass(frozen=True)
class TableCopySpec:
    """How one entity table is copied from Neon to Supabase.

    `source_columns` is the SELECT allow-list and `target_columns` the INSERT
    allow-list (defaults to the same columns). When `user_column` is set its
    value is a legacy user id and is replaced by the mapped Supabase id;
    rows whose id has no mapping are skipped. With `user_optional`, rows
    where the column is NULL are copied unchanged.
    """

    table: str
    label: str
    source_columns: tuple[str, ...]
    target_columns: tuple[str, ...] | None = None
    user_column: str | None = None
    user_optional: bool = False
    enrich: Enricher | None = None

    @property
    def insert_columns(self) -> tuple[str, ...]:
        return self.target_columns or self.source_columns


def resolve_user(spec: TableCopySpec, row: Row, user_mapping: dict[str, UserIdMapping]) -> tuple[bool, UserIdMapping | None]:
    """Resolve the row's user reference.

    Returns:
        (keep, mapping). `keep` is False when the row references an unmapped user.
    """
    if spec.user_column is None:
        return True, None

    legacy_id = row.get(spec.user_column)
    if legacy_id is None and spec.user_optional:
        return True, None

    mapping = user_mapping.get(legacy_id) if legacy_id is not None else None
    return mapping is not None, mapping


def build_row(spec: TableCopySpec, row: Row, mapping: UserIdMapping | None) -> list[Any]:
    """Values for the INSERT, in `insert_columns` order."""
    out = dict(row)
    if mapping is not None and spec.user_column is not None:
        out[spec.user_column] = mapping.new_id
    if spec.enrich is not None:
        out.update(spec.enrich(row, mapping))
    return [out.get(col) for col in spec.insert_columns]


class TableCopier:
    """Truncate-and-reinsert copier.

    Re-running a copy leaves the destination table with the same rows, so a
    phase can be repeated after a crash. A failing row is logged and counted
    but does not stop the table.
    """

    def __init__(
        self,
        source: SourceRepository,
        target: TargetRepository,
        *,
        show_progress: bool = True,
    ):
        self.source = source
        self.target = target
        self.show_progress = show_progress

    async def copy(self, spec: TableCopySpec, user_mapping: dict[str, UserIdMapping] | None = None) -> CopyResult:
        """Copy one table."""
        user_mapping = user_mapping or {}
        result = CopyResult(table=spec.table)

        await self.target.truncate(spec.table)

        rows = await self.source.fetch_rows(spec.table, spec.source_columns)
        result.total = len(rows)

        for row in tqdm(rows, desc=f"  {spec.label.capitalize()}", disable=not self.show_progress):
            keep, mapping = resolve_user(spec, row, user_mapping)
            if not keep:
                logger.warning(
                    "Skipping row with unmapped user",
                    table=spec.table,
                    id=row.get("id"),
                    user_id=row.get(spec.user_column),
                )
                result.skipped += 1
                continue

            try:
                await self.target.insert_row(spec.table, spec.insert_columns, build_row(spec, row, mapping))
                result.migrated += 1
            except ROW_ERRORS as e:
                logger.warning("Failed to migrate row", table=spec.table, id=row.get("id"), error=str(e))
                result.failed += 1

        if spec.user_column is not None:
            logger.info(
                f"Migrated {spec.label}",
                migrated=result.migrated,
                skipped=result.skipped,
                failed=result.failed,
                status="ok",
            )
        else:
            logger.info(
                f"Migrated {spec.label}",
                migrated=f"{result.migrated}/{result.total}",
                failed=result.failed,
                status="ok",
            )
        return result
