"""Core utilities package."""

from migrator.core.exceptions import (
    ConfigurationError,
    ConnectivityError,
    IdentityCreateError,
    IdentityLookupError,
    MigrationCancelledError,
    MigrationError,
    PhaseFailedError,
)
from migrator.core.logging import configure_logging

__all__ = [
    "configure_logging",
    "MigrationError",
    "ConfigurationError",
    "ConnectivityError",
    "MigrationCancelledError",
    "PhaseFailedError",
    "IdentityCreateError",
    "IdentityLookupError",
]
