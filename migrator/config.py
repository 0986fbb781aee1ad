"""Migration configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Migration settings loaded from environment variables.

    `.env.local` is listed last so its values win over `.env`.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    environment: Literal["development", "production"] = "development"
    log_level: str = "INFO"

    # Source (Neon)
    neon_database_url: str | None = None

    # Destination (Supabase Postgres, direct connection on port 5432)
    supabase_database_url: str | None = None

    # Destination identity provider (Supabase Auth)
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("supabase_url", "next_public_supabase_url"),
    )
    supabase_service_role_key: str | None = None

    # Pools
    db_pool_min_size: int = 1
    db_pool_max_size: int = 4
    db_statement_cache_size: int = 0  # pgbouncer compatibility

    # Checkpointing
    migration_state_file: str = "migration-state.json"
    checkpoint_interval: int = Field(default=10, ge=1)

    # Identity provider
    identity_request_delay_ms: int = Field(default=50, ge=0)
    identity_page_size: int = Field(default=1000, ge=1)
    verification_sample_size: int = Field(default=3, ge=0)

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    def missing_required(self, *, include_identity: bool = True) -> list[str]:
        """Return the names of required environment variables that are unset."""
        required = [
            ("NEON_DATABASE_URL", self.neon_database_url),
            ("SUPABASE_DATABASE_URL", self.supabase_database_url),
        ]
        if include_identity:
            required += [
                ("SUPABASE_URL", self.supabase_url),
                ("SUPABASE_SERVICE_ROLE_KEY", self.supabase_service_role_key),
            ]
        return [name for name, value in required if not value]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
