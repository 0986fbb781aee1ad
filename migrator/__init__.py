"""CampusReach migration from Neon (Auth.js) to Supabase."""

__version__ = "1.0.0"
