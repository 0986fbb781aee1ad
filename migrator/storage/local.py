"""Checkpoint file on the local file system."""

import json
from pathlib import Path

import aiofiles
import aiofiles.os
import structlog
from pydantic import ValidationError

from migrator.schemas.state import MigrationState
from migrator.storage.base import CheckpointStore

logger = structlog.get_logger(__name__)


class FileCheckpointStore(CheckpointStore):
    """Stores the migration state as UTF-8 JSON at a well-known path.

    Saves go through a temporary sibling file that is then renamed over the
    target, so a crash mid-write leaves the previous checkpoint intact.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @property
    def _tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    async def load(self) -> MigrationState | None:
        if not self.path.exists():
            return None

        try:
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                raw = await f.read()
            return MigrationState.model_validate(json.loads(raw))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable checkpoint", path=str(self.path), error=str(e))
            return None

    async def save(self, state: MigrationState) -> None:
        tmp_path = self._tmp_path
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(state.to_json())
        await aiofiles.os.replace(tmp_path, self.path)

    async def clear(self) -> None:
        if self.path.exists():
            await aiofiles.os.remove(self.path)
