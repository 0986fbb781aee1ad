"""Unit tests for migration settings."""

from migrator.config import Settings


class TestRequiredVariables:
    """Test detection of missing environment variables."""

    def test_all_missing_reported_in_order(self, clean_env):
        """Test that every unset variable is reported, in a stable order."""
        settings = Settings(_env_file=None)

        assert settings.missing_required() == [
            "NEON_DATABASE_URL",
            "SUPABASE_DATABASE_URL",
            "SUPABASE_URL",
            "SUPABASE_SERVICE_ROLE_KEY",
        ]

    def test_data_job_does_not_need_identity(self, clean_env):
        """Test that the data copy only requires the two database URLs."""
        settings = Settings(
            _env_file=None,
            neon_database_url="postgresql://neon/db",
            supabase_database_url="postgresql://supabase/db",
        )

        assert settings.missing_required(include_identity=False) == []
        assert settings.missing_required() == ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"]

    def test_configured(self, settings):
        """Test that a complete configuration reports nothing missing."""
        assert settings.missing_required() == []


class TestEnvironment:
    """Test values read from the environment."""

    def test_public_supabase_url_fallback(self, clean_env, monkeypatch):
        """Test that NEXT_PUBLIC_SUPABASE_URL is accepted for the project URL."""
        monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://public.supabase.co")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://public.supabase.co"

    def test_defaults(self, clean_env):
        """Test checkpoint and pacing defaults."""
        settings = Settings(_env_file=None)

        assert settings.migration_state_file == "migration-state.json"
        assert settings.checkpoint_interval == 10
        assert settings.identity_request_delay_ms == 50
        assert settings.verification_sample_size == 3
        assert settings.db_statement_cache_size == 0
        assert settings.is_production is False

    def test_env_file_loaded(self, clean_env, tmp_path):
        """Test that values are read from an env file."""
        env_file = tmp_path / ".env.local"
        env_file.write_text("NEON_DATABASE_URL=postgresql://from-file/db\n")

        settings = Settings(_env_file=env_file)

        assert settings.neon_database_url == "postgresql://from-file/db"
