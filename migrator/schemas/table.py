"""Table layout values used by the schema-comparing copier."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ColumnInfo:
    """A single column as reported by information_schema."""

    name: str
    data_type: str | None = None


@dataclass(frozen=True)
class TableSchema:
    """Ordered columns of one table in one database."""

    name: str
    columns: tuple[ColumnInfo, ...] = ()
    row_count: int = 0

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]


@dataclass(frozen=True)
class SchemaDiff:
    """Column comparison of the same table in the source and destination."""

    table: str
    common: tuple[str, ...] = ()
    missing_in_target: tuple[str, ...] = ()
    missing_in_source: tuple[str, ...] = ()
    type_mismatches: tuple[tuple[str, str | None, str | None], ...] = field(default=())

    @property
    def has_drift(self) -> bool:
        return bool(self.missing_in_target or self.missing_in_source or self.type_mismatches)
