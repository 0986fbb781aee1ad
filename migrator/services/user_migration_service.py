"""Migration of legacy users into Supabase Auth."""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from migrator.core.exceptions import IdentityCreateError, IdentityLookupError
from migrator.identity.base import AlreadyExists, Created, IdentityProvider
from migrator.repositories.source_repo import SourceRepository
from migrator.schemas.report import UserFailure, UserMigrationResult
from migrator.schemas.state import MigrationState, Phase
from migrator.schemas.user import SourceUser, UserIdMapping
from migrator.storage.base import CheckpointStore

logger = structlog.get_logger(__name__)


class UserMigrationService:
    """Creates one Supabase Auth identity per legacy user and records the id mapping.

    Each user ends as created, mapped to an existing identity, or failed. A
    failed user never stops the batch. The mapping is checkpointed every
    `checkpoint_interval` users (by index) so an interrupted run resumes
    without creating identities twice.
    """

    def __init__(
        self,
        source: SourceRepository,
        identity: IdentityProvider,
        checkpoints: CheckpointStore,
        *,
        checkpoint_interval: int = 10,
        request_delay: float = 0.05,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.source = source
        self.identity = identity
        self.checkpoints = checkpoints
        self.checkpoint_interval = checkpoint_interval
        self.request_delay = request_delay
        self.sleep = sleep

    async def migrate(self, state: MigrationState | None = None) -> UserMigrationResult:
        """Run the user phase, resuming from `state` when given."""
        logger.info("Phase 2: Migrating users to Supabase Auth")

        state = state or MigrationState()
        mapping: dict[str, UserIdMapping] = dict(state.user_mapping)
        result = UserMigrationResult(state=state, restored=len(mapping))
        if mapping:
            logger.info("Restored user mappings from previous run", count=len(mapping))

        start_index = state.last_processed_user_index
        users = await self.source.fetch_users()
        total = len(users)
        logger.info("Found users to migrate", count=total, start_index=start_index)

        for index in range(start_index, total):
            user = users[index]

            if user.id in mapping:
                continue

            progress = f"[{index + 1}/{total}]"
            try:
                outcome = await self._migrate_user(user, mapping)
            except Exception as e:
                logger.error("User failed", progress=progress, email=user.email, error=str(e))
                result.failures.append(UserFailure(user=user, error=str(e)))
            else:
                if outcome == "created":
                    result.created += 1
                    logger.info("User created", progress=progress, email=user.email, status="ok")
                else:
                    result.mapped_existing += 1
                    logger.info("User already exists, mapped", progress=progress, email=user.email)

            if index % self.checkpoint_interval == 0:
                await self._checkpoint(state, mapping, index)

            await self.sleep(self.request_delay)

        result.state = await self._checkpoint(state, mapping, total)

        logger.info(
            "User migration summary",
            created_or_mapped=len(mapping),
            created=result.created,
            mapped_existing=result.mapped_existing,
            restored=result.restored,
            failed=len(result.failures),
        )
        for failure in result.failures:
            logger.warning("Failed user", email=failure.user.email, error=failure.error)

        return result

    async def _migrate_user(self, user: SourceUser, mapping: dict[str, UserIdMapping]) -> str:
        """Create or look up the identity for one user.

        Returns:
            "created" or "mapped"

        Raises:
            IdentityLookupError: If the provider says the email exists but no such user is found
            IdentityCreateError: If the provider rejected the user for any other reason
        """
        outcome = await self.identity.create_user(user)

        if isinstance(outcome, Created):
            mapping[user.id] = UserIdMapping.for_user(user, outcome.user_id)
            return "created"

        if isinstance(outcome, AlreadyExists):
            existing_id = await self.identity.find_user_id_by_email(user.email)
            if existing_id is None:
                raise IdentityLookupError(user.email, outcome.message)
            mapping[user.id] = UserIdMapping.for_user(user, existing_id)
            return "mapped"

        raise IdentityCreateError(user.email, outcome.message)

    async def _checkpoint(
        self,
        state: MigrationState,
        mapping: dict[str, UserIdMapping],
        index: int,
    ) -> MigrationState:
        checkpoint = state.advance(
            Phase.USERS,
            user_mapping=dict(mapping),
            last_processed_user_index=index,
        )
        await self.checkpoints.save(checkpoint)
        return checkpoint
