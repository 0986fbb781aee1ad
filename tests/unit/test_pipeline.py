"""Unit tests for the auth migration pipeline."""

import pytest

from migrator.core.exceptions import MigrationCancelledError, PhaseFailedError
from migrator.pipeline import MigrationPipeline
from migrator.schemas import MigrationState, Phase, UserIdMapping
from tests.fakes import FakeDatabase, user_row

RESUME = "Resume previous migration? (yes/no): "
DUPLICATES = "Duplicate emails found. Continue anyway? (yes/no): "
PROCEED = "Proceed with migration? (yes/no): "


class ScriptedConfirm:
    """Answers prompts from a dict and records what was asked."""

    def __init__(self, **answers: bool):
        self.answers = {RESUME: answers.get("resume", True), DUPLICATES: answers.get("duplicates", True),
                        PROCEED: answers.get("proceed", True)}
        self.asked: list[str] = []

    async def __call__(self, question: str) -> bool:
        self.asked.append(question)
        return self.answers[question]


@pytest.fixture
def source_db() -> FakeDatabase:
    return FakeDatabase({
        "User": [
            user_row("u1", "ann@campus.edu", offset=0),
            user_row("u2", "bo@campus.edu", verified=False, offset=1),
            user_row("u3", None, offset=2),
        ],
        "Organization": [{"id": "o1", "name": "Food Bank"}],
        "OrganizationMember": [{"id": "m1", "organizationId": "o1", "userId": "u1", "createdAt": None}],
    })


@pytest.fixture
def make_pipeline(source_db, target_db, identity, checkpoints, settings, no_sleep):
    def make(confirm: ScriptedConfirm) -> MigrationPipeline:
        return MigrationPipeline(
            source_db,
            target_db,
            identity,
            checkpoints,
            confirm,
            settings,
            show_progress=False,
            sleep=no_sleep,
        )

    return make


class TestMigrationPipeline:
    """Test a full run against in-memory databases."""

    async def test_end_to_end(self, make_pipeline, target_db, identity, checkpoints):
        """Test users, organizations and members arrive with new ids."""
        confirm = ScriptedConfirm()

        result = await make_pipeline(confirm).run()

        assert confirm.asked == [PROCEED]
        assert result.validation.counts["User"] == 3
        assert identity.create_calls == ["ann@campus.edu", "bo@campus.edu"]
        assert set(result.state.user_mapping) == {"u1", "u2"}

        member = target_db.rows("OrganizationMember")[0]
        assert member["userId"] == result.state.user_mapping["u1"].new_id
        assert member["email"] == "ann@campus.edu"

        assert result.verification.counts["Organization"] == 1
        assert result.verification.counts["OrganizationMember"] == 1
        assert result.verification.mapping_count == 2
        assert all(sample.status == "OK" for sample in result.verification.samples)
        assert checkpoints.state.phase is Phase.COMPLETE

    async def test_phases_checkpointed_in_order(self, make_pipeline, checkpoints):
        """Test that each copier phase is recorded before it runs."""
        await make_pipeline(ScriptedConfirm()).run()

        phases = [state.phase for state in checkpoints.saves if state.phase is not Phase.USERS]
        assert phases == [phase for phase in Phase if phase is not Phase.USERS]
        assert all(state.last_processed_user_index == 2 for state in checkpoints.saves[-11:])

    async def test_duplicate_emails_declined(self, make_pipeline, source_db, identity):
        """Test that declining after a duplicate warning stops before any writes."""
        source_db.tables["User"].append(user_row("u4", "ann@campus.edu", offset=3))
        confirm = ScriptedConfirm(duplicates=False)

        with pytest.raises(MigrationCancelledError):
            await make_pipeline(confirm).run()

        assert confirm.asked == [DUPLICATES]
        assert identity.create_calls == []

    async def test_duplicate_emails_accepted(self, make_pipeline, source_db, identity):
        """Test that the second user with a taken email is mapped to the first identity."""
        source_db.tables["User"].append(user_row("u4", "ann@campus.edu", offset=3))
        confirm = ScriptedConfirm()

        result = await make_pipeline(confirm).run()

        assert confirm.asked == [DUPLICATES, PROCEED]
        assert result.users.mapped_existing == 1
        assert result.state.user_mapping["u4"].new_id == result.state.user_mapping["u1"].new_id

    async def test_not_confirmed(self, make_pipeline, target_db, identity, checkpoints):
        """Test that declining the final confirmation changes nothing."""
        with pytest.raises(MigrationCancelledError):
            await make_pipeline(ScriptedConfirm(proceed=False)).run()

        assert identity.create_calls == []
        assert target_db.truncated == []
        assert checkpoints.saves == []

    async def test_phase_failure(self, make_pipeline, target_db, checkpoints):
        """Test that an aborted phase names itself and leaves a resumable checkpoint."""
        target_db.failing_ids.add("m1")
        target_db.fail_with = ConnectionResetError

        with pytest.raises(PhaseFailedError) as exc_info:
            await make_pipeline(ScriptedConfirm()).run()

        assert exc_info.value.phase == "members"
        assert checkpoints.state.phase is Phase.MEMBERS
        assert set(checkpoints.state.user_mapping) == {"u1", "u2"}

    async def test_failed_user_does_not_stop_run(self, make_pipeline, source_db, target_db, identity, checkpoints):
        """Test that a rejected user is reported and the run still completes without their rows."""
        source_db.tables["OrganizationMember"].append(
            {"id": "m2", "organizationId": "o1", "userId": "u2", "createdAt": None},
        )
        identity.reject["bo@campus.edu"] = "Database error saving new user"

        result = await make_pipeline(ScriptedConfirm()).run()

        assert len(result.users.failures) == 1
        assert result.users.failures[0].user.id == "u2"
        assert set(result.state.user_mapping) == {"u1"}
        assert result.copies[Phase.MEMBERS].skipped == 1
        assert result.copies[Phase.MEMBERS].migrated == 1
        assert [row["id"] for row in target_db.rows("OrganizationMember")] == ["m1"]
        assert checkpoints.state.phase is Phase.COMPLETE


class TestMigrationPipelineResume:
    """Test runs that find a previous checkpoint."""

    async def test_resume_after_failure(self, make_pipeline, target_db, identity, checkpoints):
        """Test that a resumed run restarts at the failed phase without recreating users."""
        target_db.failing_ids.add("m1")
        target_db.fail_with = ConnectionResetError
        with pytest.raises(PhaseFailedError):
            await make_pipeline(ScriptedConfirm()).run()

        target_db.failing_ids.clear()
        target_db.truncated.clear()
        confirm = ScriptedConfirm(resume=True)
        result = await make_pipeline(confirm).run()

        assert confirm.asked == [RESUME, PROCEED]
        assert identity.create_calls == ["ann@campus.edu", "bo@campus.edu"]
        assert result.users is None
        assert "Organization" not in target_db.truncated
        assert target_db.truncated[0] == "OrganizationMember"
        assert target_db.rows("OrganizationMember")[0]["userId"] == result.state.user_mapping["u1"].new_id
        assert checkpoints.state.phase is Phase.COMPLETE

    async def test_resume_from_saved_mapping(self, make_pipeline, target_db, identity, checkpoints):
        """Test that copier phases use the mapping from the checkpoint."""
        checkpoints.state = MigrationState(
            phase=Phase.MEMBERS,
            user_mapping={"u1": UserIdMapping(old_id="u1", new_id="sb-earlier", email="ann@campus.edu")},
            last_processed_user_index=2,
        )

        await make_pipeline(ScriptedConfirm(resume=True)).run()

        assert identity.create_calls == []
        assert target_db.rows("OrganizationMember")[0]["userId"] == "sb-earlier"

    async def test_resume_declined(self, make_pipeline, identity, checkpoints):
        """Test that declining resume discards the old state and starts over."""
        stale = MigrationState(
            phase=Phase.MEMBERS,
            user_mapping={"u1": UserIdMapping(old_id="u1", new_id="sb-earlier", email="ann@campus.edu")},
            last_processed_user_index=2,
        )
        checkpoints.state = stale

        result = await make_pipeline(ScriptedConfirm(resume=False)).run()

        assert checkpoints.cleared is True
        assert identity.create_calls == ["ann@campus.edu", "bo@campus.edu"]
        assert result.state.user_mapping["u1"].new_id != "sb-earlier"


class TestMigrationPipelineSettings:
    """Test where the pipeline takes its settings from."""

    def test_defaults_to_cached_settings(self, source_db, target_db, identity, checkpoints, settings, monkeypatch):
        """Test that omitted settings come from the shared cached instance."""
        configured = settings.model_copy(update={"checkpoint_interval": 7, "verification_sample_size": 1})
        monkeypatch.setattr("migrator.pipeline.get_settings", lambda: configured)

        pipeline = MigrationPipeline(source_db, target_db, identity, checkpoints, ScriptedConfirm())

        assert pipeline.user_migrator.checkpoint_interval == 7
        assert pipeline.verifier.sample_size == 1
