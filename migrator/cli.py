"""Console entry points.

Usage:
    migrate-auth-to-supabase
    migrate-data-from-neon

Environment variables (read from .env and .env.local):
    NEON_DATABASE_URL: Legacy Neon PostgreSQL URL
    SUPABASE_DATABASE_URL: Supabase PostgreSQL URL (direct connection)
    SUPABASE_URL: Supabase project URL (or NEXT_PUBLIC_SUPABASE_URL)
    SUPABASE_SERVICE_ROLE_KEY: Service role key for the Auth admin API
"""

import asyncio
import sys

import asyncpg
import structlog

from migrator.config import Settings, get_settings
from migrator.core.exceptions import ConnectivityError, MigrationCancelledError, MigrationError, PhaseFailedError
from migrator.core.logging import configure_logging
from migrator.db import close_pools, connect
from migrator.identity.supabase_provider import SupabaseIdentityProvider
from migrator.pipeline import Confirm, DataMigrationPipeline, MigrationPipeline
from migrator.repositories import SchemaRepository, SourceRepository, TargetRepository
from migrator.services.schema_service import SchemaCopyService
from migrator.storage import get_checkpoint_store

logger = structlog.get_logger(__name__)

NEXT_STEPS = (
    "Verify the data in the Supabase dashboard",
    "Regenerate the Prisma client against the Supabase schema",
    "Test signing in with Google OAuth",
    "Delete the migration state file once everything checks out",
)


async def prompt(question: str) -> bool:
    """Ask a yes/no question on stdin. Only an explicit "yes" counts."""
    answer = await asyncio.to_thread(input, question)
    return answer.strip().lower() == "yes"


async def run_auth_migration(settings: Settings, confirm: Confirm = prompt) -> int:
    """Run the Neon to Supabase Auth migration.

    Returns:
        Process exit code
    """
    configure_logging(settings)
    logger.info("Neon (Auth.js) to Supabase Auth migration")

    missing = settings.missing_required()
    if missing:
        logger.error("Missing environment variables", missing=missing)
        return 1

    neon: asyncpg.Pool | None = None
    supabase: asyncpg.Pool | None = None
    try:
        neon = await connect("Neon", settings.neon_database_url, settings)
        supabase = await connect("Supabase", settings.supabase_database_url, settings)

        identity = SupabaseIdentityProvider.from_credentials(
            settings.supabase_url,
            settings.supabase_service_role_key,
            page_size=settings.identity_page_size,
        )
        pipeline = MigrationPipeline(
            SourceRepository(neon),
            TargetRepository(supabase),
            identity,
            get_checkpoint_store(settings),
            confirm,
            settings,
        )
        await pipeline.run()
    except MigrationCancelledError as e:
        logger.info(e.error_message)
        return 0
    except PhaseFailedError as e:
        logger.error("Migration stopped", phase=e.phase, error=e.error_message)
        return 1
    except MigrationError as e:
        logger.error(e.error_message, code=e.code)
        return 1
    except Exception:
        logger.exception("Migration failed")
        logger.info("You can resume this migration by running the script again")
        return 1
    finally:
        await close_pools(neon, supabase)

    logger.info("Next steps")
    for number, step in enumerate(NEXT_STEPS, 1):
        logger.info(f"  {number}. {step}")
    return 0


async def run_data_migration(settings: Settings, confirm: Confirm = prompt) -> int:
    """Run the plain Neon to Supabase data copy.

    Returns:
        Process exit code
    """
    configure_logging(settings)
    logger.info("Neon to Supabase data migration")

    missing = settings.missing_required(include_identity=False)
    if missing:
        logger.error("Missing environment variables", missing=missing)
        return 1

    neon: asyncpg.Pool | None = None
    supabase: asyncpg.Pool | None = None
    try:
        neon = await connect("Neon", settings.neon_database_url, settings)
        supabase = await connect("Supabase", settings.supabase_database_url, settings)

        service = SchemaCopyService(
            SchemaRepository(neon),
            SchemaRepository(supabase),
            SourceRepository(neon),
            TargetRepository(supabase),
        )
        await DataMigrationPipeline(service, confirm).run()
    except MigrationCancelledError as e:
        logger.info(e.error_message)
        return 0
    except ConnectivityError as e:
        logger.error(e.error_message, database=e.database)
        return 1
    except MigrationError as e:
        logger.error(e.error_message, code=e.code)
        return 1
    except Exception:
        logger.exception("Migration failed")
        return 1
    finally:
        await close_pools(neon, supabase)

    return 0


def auth_main() -> None:
    sys.exit(asyncio.run(run_auth_migration(get_settings())))


def data_main() -> None:
    sys.exit(asyncio.run(run_data_migration(get_settings())))
