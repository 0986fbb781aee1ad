"""Phase orchestration for the two migration commands."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

from migrator.config import Settings, get_settings
from migrator.core.exceptions import MigrationCancelledError, MigrationError, PhaseFailedError
from migrator.identity.base import IdentityProvider
from migrator.repositories.source_repo import SourceRepository
from migrator.repositories.target_repo import TargetRepository
from migrator.schemas.report import CopyResult, UserMigrationResult, ValidationReport, VerificationReport
from migrator.schemas.state import MigrationState, Phase
from migrator.services.copy_service import TableCopier
from migrator.services.schema_service import SchemaCopyService
from migrator.services.tables import PHASE_TABLES
from migrator.services.user_migration_service import UserMigrationService
from migrator.services.validation_service import ValidationService
from migrator.services.verification_service import VerificationService
from migrator.storage.base import CheckpointStore

logger = structlog.get_logger(__name__)

Confirm = Callable[[str], Awaitable[bool]]


@dataclass
class PipelineResult:
    """Everything the auth migration produced, phase by phase."""

    validation: ValidationReport
    state: MigrationState
    users: UserMigrationResult | None = None
    copies: dict[Phase, CopyResult] = field(default_factory=dict)
    verification: VerificationReport | None = None


class MigrationPipeline:
    """Neon (Auth.js) to Supabase Auth migration.

    Phases run strictly in order: users, then one copier per table in
    dependency order, then verification. The checkpoint records the next
    phase to run before that phase starts, so a crashed run resumes at the
    phase that failed. Nothing is rolled back on failure; copier phases
    truncate and reinsert, so repeating them is safe.
    """

    def __init__(
        self,
        source: SourceRepository,
        target: TargetRepository,
        identity: IdentityProvider,
        checkpoints: CheckpointStore,
        confirm: Confirm,
        settings: Settings | None = None,
        *,
        show_progress: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = settings or get_settings()
        self.checkpoints = checkpoints
        self.confirm = confirm
        self.validator = ValidationService(source)
        self.user_migrator = UserMigrationService(
            source,
            identity,
            checkpoints,
            checkpoint_interval=settings.checkpoint_interval,
            request_delay=settings.identity_request_delay_ms / 1000,
            sleep=sleep,
        )
        self.copier = TableCopier(source, target, show_progress=show_progress)
        self.verifier = VerificationService(target, identity, sample_size=settings.verification_sample_size)

    async def run(self) -> PipelineResult:
        """Run the migration, prompting the operator at each decision point.

        Raises:
            MigrationCancelledError: If the operator declines a prompt
            PhaseFailedError: If a phase raised; the checkpoint allows resuming
        """
        state = await self._load_previous_state()

        validation = await self.validator.validate()
        if validation.has_duplicates and not await self.confirm("Duplicate emails found. Continue anyway? (yes/no): "):
            raise MigrationCancelledError()

        logger.warning("This will create Supabase Auth users from Neon users")
        logger.warning("This will TRUNCATE all data tables in Supabase")
        logger.warning("This will copy all data from Neon with new user ID mappings")
        if not await self.confirm("Proceed with migration? (yes/no): "):
            raise MigrationCancelledError()

        result = PipelineResult(validation=validation, state=state or MigrationState())
        start = state.phase if state else Phase.USERS
        current = Phase.USERS.value

        try:
            if start is Phase.USERS:
                result.users = await self.user_migrator.migrate(state)
                result.state = result.users.state
            else:
                logger.info(
                    "Skipping users phase, mapping restored from checkpoint",
                    resume_phase=start.value,
                    mappings=len(result.state.user_mapping),
                )

            for phase, spec in PHASE_TABLES.items():
                if phase.position < start.position:
                    continue
                current = phase.value
                result.state = result.state.advance(phase)
                await self.checkpoints.save(result.state)

                logger.info(f"Phase {phase.position + 2}: Migrating {spec.label}")
                result.copies[phase] = await self.copier.copy(spec, result.state.user_mapping)

            current = "verify"
            result.verification = await self.verifier.verify(result.state.user_mapping)

            result.state = result.state.advance(Phase.COMPLETE)
            await self.checkpoints.save(result.state)
        except Exception as e:
            logger.exception("Migration failed", phase=current)
            logger.info("You can resume this migration by running the script again")
            raise PhaseFailedError(current, str(e)) from e

        logger.info("Migration complete", status="ok")
        return result

    async def _load_previous_state(self) -> MigrationState | None:
        state = await self.checkpoints.load()
        if state is None:
            return None

        logger.warning("Found existing migration state", phase=state.phase.value)
        if await self.confirm("Resume previous migration? (yes/no): "):
            return state

        await self.checkpoints.clear()
        logger.info("Starting fresh migration")
        return None


class DataMigrationPipeline:
    """Plain table copy from Neon to Supabase by shared columns."""

    def __init__(self, service: SchemaCopyService, confirm: Confirm):
        self.service = service
        self.confirm = confirm

    async def run(self) -> int:
        """Compare, confirm, clear and copy. Returns the number of rows copied."""
        comparison = await self.service.compare()
        if not comparison.source:
            raise MigrationError(code="NO_SOURCE_TABLES", message="No tables found in Neon database")

        logger.warning("This will clear all existing data in Supabase!")
        if not await self.confirm("Do you want to proceed? (yes/no): "):
            raise MigrationCancelledError()

        await self.service.clear_target(comparison)

        logger.info("Migrating data")
        total = await self.service.copy_all(comparison)
        logger.info(f"Migration complete! Migrated {total} total rows.", status="ok")
        return total
