"""Base checkpoint store abstraction."""

from abc import ABC, abstractmethod

from migrator.schemas.state import MigrationState


class CheckpointStore(ABC):
    """Abstract base class for migration checkpoint persistence.

    Phase logic only talks to this interface, so it can run against an
    in-memory store in tests and the checkpoint file in production.
    """

    @abstractmethod
    async def load(self) -> MigrationState | None:
        """Load the saved state.

        Returns:
            The saved state, or None if nothing is saved or the saved
            content cannot be parsed
        """
        pass

    @abstractmethod
    async def save(self, state: MigrationState) -> None:
        """Replace any saved state with `state`.

        Args:
            state: State to persist
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete the saved state, if any."""
        pass
