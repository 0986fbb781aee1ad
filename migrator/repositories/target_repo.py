"""Writes and counts against the Supabase destination database."""

from collections.abc import Sequence
from typing import Any

import asyncpg

from migrator.repositories.base import build_insert, quote_ident


class TargetRepository:
    """Repository for the destination database."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def truncate(self, table: str) -> None:
        """Empty a table and everything that references it."""
        await self.pool.execute(f"TRUNCATE TABLE {quote_ident(table)} CASCADE")

    async def insert_row(
        self,
        table: str,
        columns: Sequence[str],
        values: Sequence[Any],
        *,
        on_conflict_do_nothing: bool = False,
    ) -> str:
        """Insert a single row.

        Returns:
            The command status, e.g. "INSERT 0 1" ("INSERT 0 0" when a conflict was ignored)
        """
        query = build_insert(table, columns, on_conflict_do_nothing=on_conflict_do_nothing)
        return await self.pool.execute(query, *values)

    async def count_rows(self, table: str) -> int:
        """Count rows in a table."""
        return await self.pool.fetchval(f"SELECT COUNT(*) FROM {quote_ident(table)}")
