"""Custom exception classes for migration errors."""

from typing import Any


class MigrationError(Exception):
    """Base migration error with structured details."""

    def __init__(self, code: str, message: str, details: Any = None):
        self.code = code
        self.error_message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(MigrationError):
    """Required configuration is missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=f"Missing environment variables: {', '.join(missing)}",
            details={"missing": missing},
        )


class ConnectivityError(MigrationError):
    """A database could not be reached."""

    def __init__(self, database: str, reason: str):
        self.database = database
        super().__init__(
            code="CONNECTIVITY_ERROR",
            message=f"Cannot connect to {database}: {reason}",
            details={"database": database},
        )


class MigrationCancelledError(MigrationError):
    """The operator declined a confirmation prompt."""

    def __init__(self, message: str = "Migration cancelled"):
        super().__init__(code="CANCELLED", message=message)


class PhaseFailedError(MigrationError):
    """An unhandled error escaped a phase; the run can be resumed."""

    def __init__(self, phase: str, reason: str):
        self.phase = phase
        super().__init__(
            code="PHASE_FAILED",
            message=f"Phase '{phase}' failed: {reason}",
            details={"phase": phase},
        )


class IdentityLookupError(MigrationError):
    """The provider reported an existing user but no user with that email was found."""

    def __init__(self, email: str, provider_message: str):
        self.email = email
        super().__init__(
            code="IDENTITY_LOOKUP_FAILED",
            message=f"{provider_message} (no existing user found for {email})",
            details={"email": email},
        )


class IdentityCreateError(MigrationError):
    """The provider rejected a user for a reason other than an existing email."""

    def __init__(self, email: str, provider_message: str):
        self.email = email
        super().__init__(
            code="IDENTITY_CREATE_FAILED",
            message=provider_message,
            details={"email": email},
        )
