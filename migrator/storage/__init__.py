"""Checkpoint stores package."""

from migrator.config import Settings
from migrator.storage.base import CheckpointStore
from migrator.storage.local import FileCheckpointStore


def get_checkpoint_store(settings: Settings) -> CheckpointStore:
    """Get the checkpoint store configured for this run."""
    return FileCheckpointStore(settings.migration_state_file)


__all__ = [
    "CheckpointStore",
    "FileCheckpointStore",
    "get_checkpoint_store",
]
