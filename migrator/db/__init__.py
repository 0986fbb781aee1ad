"""Database package."""

from migrator.db.session import close_pools, connect, create_pool

__all__ = ["connect", "create_pool", "close_pools"]
