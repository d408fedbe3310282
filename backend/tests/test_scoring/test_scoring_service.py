"""End-to-end tests for ProjectScoringService with a scripted oracle."""

import asyncio

import pytest

from conftest import FakeOracle, UnreachableOracle, criterion_reply
from models.requests import ProjectScoringRequest, UserProfileSnippet
from models.schemas.criterion import CriterionAssessment
from models.schemas.enums import CraftType, CriterionKind, SkillLevel
from services.exceptions import InvalidCraftTypeError
from services.scoring.feedback import FALLBACK_OVERALL_FEEDBACK
from services.scoring.orchestrator import (
    REASON_INCONSISTENT_SCORES,
    REASON_LOW_CRITERION_CONFIDENCE,
    REASON_LOW_OVERALL_CONFIDENCE,
    ProjectScoringService,
    build_context,
    overall_confidence,
    review_decision,
)


def _assessments(scores: list[int], confidences: list[int]) -> list[CriterionAssessment]:
    return [
        CriterionAssessment(criterion=kind, score=score, confidence=confidence)
        for kind, score, confidence in zip(CriterionKind, scores, confidences)
    ]


class TestScoreProject:
    @pytest.mark.asyncio
    async def test_confident_uniform_scores(self, detailed_request):
        service = ProjectScoringService(FakeOracle(default=criterion_reply(80, 90)))
        result = await service.score_project(detailed_request)

        assert result.individual_skill_score == 80
        assert result.skill_level_category == SkillLevel.CRAFTSMAN
        assert result.ai_scoring_metadata.needs_human_review is False
        assert result.ai_scoring_metadata.review_reason is None
        assert result.ai_scoring_metadata.confidence == 90

    @pytest.mark.asyncio
    async def test_result_identity_and_criteria(self, detailed_request):
        service = ProjectScoringService(FakeOracle(), model_version="gemini-test")
        result = await service.score_project(detailed_request)

        assert result.scoring_id.startswith("scoring_")
        assert result.project_id == "proj-1"
        assert result.user_id == "user-1"
        assert result.ai_scoring_metadata.model_version == "gemini-test"
        assert result.ai_scoring_metadata.processing_time_ms >= 0
        criteria = result.scoring_criteria
        assert criteria.technical_execution.weight == 0.40
        assert criteria.documentation_completeness.score == 79
        assert sum(c.weight for _, c in criteria.items()) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_metadata_describes_craft_and_documentation(self, detailed_request):
        result = await ProjectScoringService(FakeOracle()).score_project(detailed_request)
        metadata = result.ai_scoring_metadata
        assert metadata.craft_type_specific.craft_type == CraftType.WOODWORKING
        assert metadata.craft_type_specific.evaluation_focus
        assert metadata.documentation_analysis.completeness == 75

    @pytest.mark.asyncio
    async def test_narrative_feedback_from_oracle(self, detailed_request):
        result = await ProjectScoringService(FakeOracle()).score_project(detailed_request)
        assert result.overall_feedback.startswith("A clean, well-executed side table")
        assert len(result.strengths) == 3
        assert result.improvement_areas[0] == "Add process photos"
        assert result.next_step_suggestions[-1] == "Build a matching chair"

    @pytest.mark.asyncio
    async def test_single_low_confidence_criterion_escalates(self, detailed_request):
        oracle = FakeOracle(criteria={CriterionKind.SAFETY_ADHERENCE: criterion_reply(80, 40)})
        result = await ProjectScoringService(oracle).score_project(detailed_request)

        assert result.ai_scoring_metadata.confidence == 80
        assert result.ai_scoring_metadata.needs_human_review is True
        assert result.ai_scoring_metadata.review_reason == REASON_LOW_CRITERION_CONFIDENCE

    @pytest.mark.asyncio
    async def test_unreachable_oracle_degrades_every_criterion(self, detailed_request):
        result = await ProjectScoringService(UnreachableOracle()).score_project(detailed_request)

        for _, criterion in result.scoring_criteria.items():
            assert criterion.score == 70
            assert criterion.confidence == 40
        assert result.individual_skill_score == 70
        assert result.ai_scoring_metadata.confidence == 40
        assert result.ai_scoring_metadata.needs_human_review is True
        assert result.ai_scoring_metadata.review_reason == REASON_LOW_OVERALL_CONFIDENCE
        assert result.overall_feedback == FALLBACK_OVERALL_FEEDBACK
        assert result.strengths[0] == "Strong performance in technical execution"

    @pytest.mark.asyncio
    async def test_one_failing_criterion_does_not_cancel_others(self, detailed_request):
        oracle = FakeOracle(
            criteria={CriterionKind.INNOVATION_CREATIVITY: RuntimeError("boom")},
            default=criterion_reply(90, 95),
        )
        result = await ProjectScoringService(oracle).score_project(detailed_request)

        criteria = result.scoring_criteria
        assert criteria.innovation_creativity.score == 70
        assert criteria.innovation_creativity.feedback == "Innovation and creativity evaluation unavailable"
        assert criteria.technical_execution.score == 90
        assert criteria.safety_adherence.score == 90

    @pytest.mark.asyncio
    async def test_feedback_failure_uses_fallback(self, detailed_request):
        oracle = FakeOracle(
            criteria={CriterionKind.SAFETY_ADHERENCE: criterion_reply(95, 90)},
            feedback=TimeoutError("slow"),
        )
        result = await ProjectScoringService(oracle).score_project(detailed_request)
        assert result.overall_feedback == FALLBACK_OVERALL_FEEDBACK
        assert result.strengths[0] == "Strong performance in safety adherence"

    @pytest.mark.asyncio
    async def test_criteria_evaluated_concurrently(self, detailed_request):
        delays = {kind: 0.2 for kind in CriterionKind}
        oracle = FakeOracle(delays=delays)
        service = ProjectScoringService(oracle)

        loop = asyncio.get_running_loop()
        start = loop.time()
        await service.score_project(detailed_request)
        assert loop.time() - start < 0.8

    @pytest.mark.asyncio
    async def test_slow_criterion_resolves_to_fallback(self, detailed_request):
        oracle = FakeOracle(delays={CriterionKind.TECHNICAL_EXECUTION: 5.0})
        service = ProjectScoringService(oracle, criterion_timeout_seconds=0.05)
        result = await service.score_project(detailed_request)
        assert result.scoring_criteria.technical_execution.confidence == 40

    @pytest.mark.asyncio
    async def test_every_criterion_prompted_once_plus_feedback(self, detailed_request):
        oracle = FakeOracle()
        await ProjectScoringService(oracle).score_project(detailed_request)
        assert len(oracle.criterion_prompts()) == 5
        assert len(oracle.prompts) == 6
        assert "Overall Score: 80/100" in oracle.prompts[-1]

    @pytest.mark.asyncio
    async def test_hot_work_craft_uses_override_weights(self, detailed_request):
        request = detailed_request.model_copy(update={"craft_type": CraftType.BLACKSMITHING})
        result = await ProjectScoringService(FakeOracle()).score_project(request)
        assert result.scoring_criteria.safety_adherence.weight == 0.15
        assert result.scoring_criteria.technical_execution.weight == 0.35

    @pytest.mark.asyncio
    async def test_invalid_craft_type_is_fatal(self, detailed_request):
        request = detailed_request.model_copy(update={"craft_type": "origami"})
        with pytest.raises(InvalidCraftTypeError):
            await ProjectScoringService(FakeOracle()).score_project(request)


class TestEscalation:
    def test_overall_confidence_wins_over_variance(self):
        assessments = _assessments([100, 0, 100, 0, 100], [60] * 5)
        confidence = overall_confidence(assessments)
        assert confidence == 60
        assert review_decision(assessments, confidence) == (True, REASON_LOW_OVERALL_CONFIDENCE)

    def test_overall_confidence_wins_over_low_criterion(self):
        assessments = _assessments([70] * 5, [40, 40, 80, 90, 90])
        assert review_decision(assessments, overall_confidence(assessments)) == (
            True,
            REASON_LOW_OVERALL_CONFIDENCE,
        )

    def test_low_criterion_wins_over_variance(self):
        assessments = _assessments([100, 0, 100, 0, 100], [45, 90, 90, 90, 90])
        assert overall_confidence(assessments) == 81
        assert review_decision(assessments, 81) == (True, REASON_LOW_CRITERION_CONFIDENCE)

    def test_high_variance_alone(self):
        assessments = _assessments([100, 20, 100, 20, 100], [90] * 5)
        assert review_decision(assessments, 90) == (True, REASON_INCONSISTENT_SCORES)

    def test_moderate_variance_not_flagged(self):
        # Population variance of [0, 0, 50, 50, 50] is 600
        assessments = _assessments([0, 0, 50, 50, 50], [90] * 5)
        assert review_decision(assessments, 90) == (False, None)

    def test_mean_confidence_rounds_half_up(self):
        assessments = _assessments([70] * 5, [70, 70, 69, 69, 69])
        # mean 69.4
        assert overall_confidence(assessments) == 69
        assessments = _assessments([70] * 5, [70, 70, 70, 69, 69])
        # mean 69.6
        assert overall_confidence(assessments) == 70


class TestBuildContext:
    def test_defaults_without_profile(self, detailed_request):
        context = build_context(detailed_request)
        assert context.user_profile.skill_level == "apprentice"
        assert context.user_profile.craft_specialization == ["woodworking"]
        assert context.current_project.difficulty == "beginner"
        assert "cutting" in context.current_project.techniques

    def test_profile_and_difficulty(self):
        request = ProjectScoringRequest(
            project_id="p",
            user_id="u",
            craft_type=CraftType.LEATHERCRAFT,
            description="An advanced tooled wallet with complex stitching.",
            user_skill_level=SkillLevel.JOURNEYMAN,
            user_profile=UserProfileSnippet(
                bio="Saddler", craft_specialization=[CraftType.LEATHERCRAFT, CraftType.WEAVING]
            ),
        )
        context = build_context(request)
        assert context.user_profile.skill_level == "journeyman"
        assert context.user_profile.craft_specialization == ["leathercraft", "weaving"]
        assert context.user_profile.bio == "Saddler"
        assert context.current_project.difficulty == "advanced"

    @pytest.mark.asyncio
    async def test_context_shared_by_all_oracle_calls(self, detailed_request):
        oracle = FakeOracle()
        await ProjectScoringService(oracle).score_project(detailed_request)
        assert len({id(c) for c in oracle.contexts}) == 1
