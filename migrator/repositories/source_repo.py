"""Read-only queries against the Neon source database."""

from collections.abc import Sequence
from typing import Any

import asyncpg

from migrator.repositories.base import column_list, quote_ident
from migrator.schemas.user import SourceUser


class SourceRepository:
    """Repository for reads from the legacy database."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def count_rows(self, table: str) -> int:
        """Count rows in a table."""
        return await self.pool.fetchval(f"SELECT COUNT(*) FROM {quote_ident(table)}")

    async def find_duplicate_emails(self) -> list[str]:
        """Emails used by more than one user, one entry per email."""
        rows = await self.pool.fetch(
            """
            SELECT email, COUNT(*) AS count
            FROM "User"
            WHERE email IS NOT NULL
            GROUP BY email
            HAVING COUNT(*) > 1
            ORDER BY email
            """
        )
        return [row["email"] for row in rows]

    async def fetch_users(self) -> list[SourceUser]:
        """Users with an email, oldest first."""
        rows = await self.pool.fetch(
            """
            SELECT id, name, email, "emailVerified", image, role,
                   "profileComplete", "createdAt", "updatedAt"
            FROM "User"
            WHERE email IS NOT NULL
            ORDER BY "createdAt" ASC, id ASC
            """
        )
        return [SourceUser.model_validate(dict(row)) for row in rows]

    async def fetch_rows(self, table: str, columns: Sequence[str]) -> list[dict[str, Any]]:
        """All rows of a table, restricted to `columns`."""
        rows = await self.pool.fetch(f"SELECT {column_list(columns)} FROM {quote_ident(table)}")
        return [dict(row) for row in rows]
