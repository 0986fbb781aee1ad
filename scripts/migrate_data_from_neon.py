#!/usr/bin/env python3
"""Copy data tables from Neon to Supabase by matching columns.

Compares both schemas, reports drift, then truncates and refills the
Supabase tables using only the columns both sides share. User ids are
copied as-is.

Usage:
    python scripts/migrate_data_from_neon.py

Environment variables:
    NEON_DATABASE_URL: Legacy Neon PostgreSQL URL
    SUPABASE_DATABASE_URL: Supabase PostgreSQL URL
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from migrator.cli import data_main  # noqa: E402

if __name__ == "__main__":
    data_main()
