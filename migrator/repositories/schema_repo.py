"""information_schema introspection."""

import asyncpg

from migrator.repositories.base import quote_ident
from migrator.schemas.table import ColumnInfo, TableSchema


class SchemaRepository:
    """Reads table layouts from a database's `public` schema."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    async def table_exists(self, table: str) -> bool:
        return await self.pool.fetchval(
            """
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = $1 AND table_name = $2
            )
            """,
            self.schema,
            table,
        )

    async def get_table_schema(self, table: str) -> TableSchema | None:
        """Columns (in ordinal order) and row count, or None if the table is absent."""
        if not await self.table_exists(table):
            return None

        rows = await self.pool.fetch(
            """
            SELECT column_name, data_type
            FROM information_schema.columns
            WHERE table_schema = $1 AND table_name = $2
            ORDER BY ordinal_position
            """,
            self.schema,
            table,
        )
        row_count = await self.pool.fetchval(f"SELECT COUNT(*) FROM {quote_ident(table)}")

        return TableSchema(
            name=table,
            columns=tuple(ColumnInfo(row["column_name"], row["data_type"]) for row in rows),
            row_count=row_count,
        )
