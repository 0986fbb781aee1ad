"""Pytest configuration and fixtures."""

import pytest

from migrator.config import Settings
from tests.fakes import FakeDatabase, FakeIdentityProvider, InMemoryCheckpointStore

ENV_VARS = (
    "NEON_DATABASE_URL",
    "SUPABASE_DATABASE_URL",
    "SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove migration variables inherited from the shell."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(clean_env) -> Settings:
    """Fully configured settings that never read .env files."""
    return Settings(
        _env_file=None,
        neon_database_url="postgresql://neon.example.com/campusreach",
        supabase_database_url="postgresql://db.example.supabase.co/postgres",
        supabase_url="https://example.supabase.co",
        supabase_service_role_key="service-role-key",
        identity_request_delay_ms=0,
    )


@pytest.fixture
def source_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def target_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def checkpoints() -> InMemoryCheckpointStore:
    return InMemoryCheckpointStore()


@pytest.fixture
def no_sleep():
    """Replacement for asyncio.sleep that records requested delays."""
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    sleep.delays = delays
    return sleep
