"""SQL helpers shared by the repositories."""

from collections.abc import Sequence


def quote_ident(name: str) -> str:
    """Quote a Postgres identifier (tables and columns are PascalCase/camelCase)."""
    return '"' + name.replace('"', '""') + '"'


def column_list(columns: Sequence[str]) -> str:
    return ", ".join(quote_ident(col) for col in columns)


def placeholders(count: int) -> str:
    return ", ".join(f"${i}" for i in range(1, count + 1))


def build_insert(table: str, columns: Sequence[str], *, on_conflict_do_nothing: bool = False) -> str:
    """Build a parameterised INSERT with an explicit column list."""
    query = f"INSERT INTO {quote_ident(table)} ({column_list(columns)}) VALUES ({placeholders(len(columns))})"
    if on_conflict_do_nothing:
        query += " ON CONFLICT DO NOTHING"
    return query
