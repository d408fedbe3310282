"""Tests for the post-creation submission flow."""

import pytest

from conftest import FakeOracle, UnreachableOracle, criterion_reply
from models.schemas.enums import CriterionKind, ReviewPriority, SkillLevel
from models.schemas.review import PERMISSION_DENIED
from models.schemas.skill import User
from services.review_service import ManualReviewService
from services.scoring.orchestrator import ProjectScoringService
from services.skill_level_service import UserSkillLevelService
from services.stores import InMemoryProjectStore, InMemoryReviewStore, InMemoryUserStore
from services.submission import SCORING_UNAVAILABLE_MESSAGE, ProjectSubmissionFlow


def _flow(oracle, review_store=None):
    users = InMemoryUserStore()
    users.add_user(User(id="user-1"))
    projects = InMemoryProjectStore()
    review_store = review_store or InMemoryReviewStore()
    flow = ProjectSubmissionFlow(
        ProjectScoringService(oracle),
        ManualReviewService(review_store),
        UserSkillLevelService(users, projects),
        projects,
    )
    return flow, users, projects, review_store


class BrokenScoringService:
    async def score_project(self, request):
        raise RuntimeError("weight table unavailable")


class TestProjectSubmissionFlow:
    @pytest.mark.asyncio
    async def test_confident_score_saved_without_review(self, detailed_request):
        flow, users, projects, review_store = _flow(FakeOracle())
        outcome = await flow.submit(detailed_request)

        assert outcome.scoring_available
        assert outcome.review_id is None
        assert await review_store.list_all() == []
        saved = await projects.get_result(outcome.result.scoring_id)
        assert saved == outcome.result

        assert outcome.skill_update.level_changed is True
        assert outcome.skill_level_event.new_level == SkillLevel.CRAFTSMAN
        user = await users.get_user("user-1")
        assert user.scoring.calculated_skill_level == SkillLevel.CRAFTSMAN

    @pytest.mark.asyncio
    async def test_flagged_result_submitted_for_review(self, detailed_request):
        oracle = FakeOracle(criteria={CriterionKind.SAFETY_ADHERENCE: criterion_reply(80, 40)})
        flow, _, _, review_store = _flow(oracle)
        outcome = await flow.submit(detailed_request)

        assert outcome.review_id is not None
        review = await review_store.get(outcome.review_id)
        assert review.review_reason == "Low confidence in specific criteria evaluation"
        assert review.priority == ReviewPriority.LOW
        assert review.metadata.flagged_criteria == ["safety_adherence"]

    @pytest.mark.asyncio
    async def test_unreachable_oracle_still_completes(self, detailed_request):
        flow, _, _, review_store = _flow(UnreachableOracle())
        outcome = await flow.submit(detailed_request)

        assert outcome.scoring_available
        assert outcome.result.individual_skill_score == 70
        review = await review_store.get(outcome.review_id)
        assert review.priority == ReviewPriority.HIGH

    @pytest.mark.asyncio
    async def test_review_permission_failure_is_soft(self, detailed_request):
        flow, users, _, _ = _flow(UnreachableOracle(), InMemoryReviewStore(deny_writes=True))
        outcome = await flow.submit(detailed_request)

        assert outcome.review_id == PERMISSION_DENIED
        assert outcome.skill_update is not None
        assert (await users.get_user("user-1")).scoring is not None

    @pytest.mark.asyncio
    async def test_scoring_failure_reports_unavailable(self, detailed_request):
        flow, users, projects, _ = _flow(FakeOracle())
        flow.scoring = BrokenScoringService()
        outcome = await flow.submit(detailed_request)

        assert outcome.scoring_available is False
        assert outcome.message == SCORING_UNAVAILABLE_MESSAGE
        assert outcome.result is None
        assert await projects.get_scored_projects_for_user("user-1") == []
        assert (await users.get_user("user-1")).scoring is None
