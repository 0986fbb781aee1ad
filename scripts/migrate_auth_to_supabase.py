#!/usr/bin/env python3
"""Migrate Neon (Auth.js) users and data to Supabase Auth.

Creates a Supabase Auth user per legacy user, then copies every data table
with user ids rewritten to the new Supabase ids. Progress is checkpointed to
migration-state.json; re-run the script to resume after a failure.

Usage:
    python scripts/migrate_auth_to_supabase.py

Environment variables:
    NEON_DATABASE_URL: Legacy Neon PostgreSQL URL
    SUPABASE_DATABASE_URL: Supabase PostgreSQL URL
    SUPABASE_URL: Supabase project URL
    SUPABASE_SERVICE_ROLE_KEY: Service role key for the Auth admin API
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from migrator.cli import auth_main  # noqa: E402

if __name__ == "__main__":
    auth_main()
