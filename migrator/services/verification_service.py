"""Post-migration verification."""

import structlog

from migrator.identity.base import IdentityProvider
from migrator.repositories.target_repo import TargetRepository
from migrator.schemas.report import SampleCheck, VerificationReport
from migrator.schemas.user import UserIdMapping
from migrator.services.tables import DESTINATION_TABLES

logger = structlog.get_logger(__name__)


class VerificationService:
    """Re-counts the destination and spot-checks a few mapped identities.

    This is a smoke test for manual comparison with the pre-migration
    counts, not an exhaustive check.
    """

    def __init__(self, target: TargetRepository, identity: IdentityProvider, sample_size: int = 3):
        self.target = target
        self.identity = identity
        self.sample_size = sample_size

    async def verify(self, user_mapping: dict[str, UserIdMapping]) -> VerificationReport:
        logger.info("Phase 13: Verifying migration")

        report = VerificationReport(mapping_count=len(user_mapping))
        for table in DESTINATION_TABLES:
            report.counts[table] = await self.target.count_rows(table)
        logger.info("Supabase counts", user_mappings=report.mapping_count, **report.counts)

        for mapping in list(user_mapping.values())[: self.sample_size]:
            check = await self._check(mapping)
            report.samples.append(check)
            if check.status == "OK":
                logger.info(
                    "Sample user verified",
                    email=mapping.email,
                    old_id=mapping.old_id[:8],
                    new_id=mapping.new_id[:8],
                    status="ok",
                )
            else:
                logger.error("Sample user check failed", email=mapping.email, status=check.status, detail=check.detail)

        return report

    async def _check(self, mapping: UserIdMapping) -> SampleCheck:
        check = SampleCheck(email=mapping.email, old_id=mapping.old_id, new_id=mapping.new_id, status="OK")
        try:
            if not await self.identity.user_exists(mapping.new_id):
                check.status = "NOT FOUND"
        except Exception as e:
            check.status = "ERROR"
            check.detail = str(e)
        return check
