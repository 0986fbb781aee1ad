"""Pre-migration validation of the source database."""

import structlog

from migrator.repositories.source_repo import SourceRepository
from migrator.schemas.report import ValidationReport

logger = structlog.get_logger(__name__)

# Entity tables counted before migrating, in report order
SOURCE_TABLES = (
    "User",
    "Organization",
    "Event",
    "OrganizationMember",
    "OrganizationContact",
    "Volunteer",
    "EventSignup",
    "GroupChat",
    "EventRating",
    "TimeEntry",
    "ChatMessage",
)


class ValidationService:
    """Counts source rows and finds emails that would collide in Supabase Auth."""

    def __init__(self, source: SourceRepository):
        self.source = source

    async def validate(self) -> ValidationReport:
        """Run the read-only pre-migration checks."""
        logger.info("Phase 1: Pre-migration validation")

        report = ValidationReport()
        report.duplicate_emails = await self.source.find_duplicate_emails()
        if report.has_duplicates:
            logger.warning("Found duplicate emails", count=len(report.duplicate_emails))
            for email in report.duplicate_emails:
                logger.warning("Duplicate email", email=email)

        for table in SOURCE_TABLES:
            report.counts[table] = await self.source.count_rows(table)

        logger.info("Records to migrate", **report.counts)
        return report
