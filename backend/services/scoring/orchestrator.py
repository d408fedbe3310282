"""Scoring orchestrator: fans out the five criterion evaluations and folds them into one result.

Flow:
    ProjectScoringRequest
      ├─ build_context()                       → ScoringContext (once)
      ├─ 5 × evaluator.evaluate()  [TaskGroup] → CriterionAssessment each
      │          ↓ (barrier)
      ├─ framework.aggregate()                 → individual_skill_score
      ├─ framework.skill_level_for()           → skill_level_category
      ├─ overall_confidence / escalation       → needs_human_review, review_reason
      ├─ generate_feedback()  [sequential]     → ProjectFeedback
      └─ ProjectScoringResult

No persistence happens here; saving the result and submitting it for review
belong to the caller.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone

import numpy as np

from models.requests import ProjectScoringRequest
from models.responses import (
    AIScoringMetadata,
    ProjectScoringResult,
    ScoringCriteria,
    ScoringCriterion,
)
from models.schemas.criterion import (
    CriterionAssessment,
    ProjectContext,
    ScoringContext,
    UserContext,
)
from models.schemas.enums import CriterionKind
from services import craft_profiles
from services.scoring import framework
from services.scoring.base import BaseCriterionEvaluator, Oracle
from services.scoring.feedback import generate_feedback
from services.scoring.registry import build_evaluators

logger = logging.getLogger(__name__)

OVERALL_CONFIDENCE_THRESHOLD = 70
CRITERION_CONFIDENCE_THRESHOLD = 50
SCORE_VARIANCE_THRESHOLD = 800

REASON_LOW_OVERALL_CONFIDENCE = "Low overall confidence in AI assessment"
REASON_LOW_CRITERION_CONFIDENCE = "Low confidence in specific criteria evaluation"
REASON_INCONSISTENT_SCORES = "Inconsistent scoring across criteria"

KNOWN_TECHNIQUES = ["cutting", "sanding", "joining", "finishing", "measuring", "drilling"]


def estimate_difficulty(description: str) -> str:
    text = description.lower()
    if "advanced" in text or "complex" in text:
        return "advanced"
    if "intermediate" in text or "moderate" in text:
        return "intermediate"
    return "beginner"


def extract_techniques(description: str) -> list[str]:
    text = description.lower()
    return [technique for technique in KNOWN_TECHNIQUES if technique in text]


def build_context(request: ProjectScoringRequest) -> ScoringContext:
    """Shared context for every oracle call of one scoring pass."""
    profile = request.user_profile
    specializations = (
        [craft.value for craft in profile.craft_specialization]
        if profile and profile.craft_specialization
        else [request.craft_type.value]
    )
    return ScoringContext(
        user_profile=UserContext(
            craft_specialization=specializations,
            skill_level=request.user_skill_level.value if request.user_skill_level else "apprentice",
            bio=profile.bio if profile else None,
        ),
        current_project=ProjectContext(
            description=request.description,
            craft_type=request.craft_type,
            difficulty=estimate_difficulty(request.description),
            materials=list(request.materials),
            techniques=extract_techniques(request.description),
        ),
    )


def overall_confidence(assessments: list[CriterionAssessment]) -> int:
    """Arithmetic mean of the criterion confidences, rounded half-up."""
    return framework.round_half_up(float(np.mean([a.confidence for a in assessments])))


def review_decision(
    assessments: list[CriterionAssessment],
    confidence: int,
) -> tuple[bool, str | None]:
    """Escalation policy. Rules are checked in order and the first hit wins."""
    if confidence < OVERALL_CONFIDENCE_THRESHOLD:
        return True, REASON_LOW_OVERALL_CONFIDENCE
    if any(a.confidence < CRITERION_CONFIDENCE_THRESHOLD for a in assessments):
        return True, REASON_LOW_CRITERION_CONFIDENCE
    if framework.score_variance([a.score for a in assessments]) > SCORE_VARIANCE_THRESHOLD:
        return True, REASON_INCONSISTENT_SCORES
    return False, None


class ProjectScoringService:
    """Scores project submissions against the five weighted criteria.

    Construct once at startup and share; it holds no per-request state.
    """

    def __init__(
        self,
        oracle: Oracle,
        model_version: str = "",
        criterion_timeout_seconds: float = 30.0,
        feedback_timeout_seconds: float = 30.0,
        evaluators: dict[CriterionKind, BaseCriterionEvaluator] | None = None,
    ) -> None:
        self.oracle = oracle
        self.model_version = model_version
        self.feedback_timeout_seconds = feedback_timeout_seconds
        self.evaluators = evaluators or build_evaluators(oracle, criterion_timeout_seconds)

    async def score_project(self, request: ProjectScoringRequest) -> ProjectScoringResult:
        start = time.perf_counter()
        scoring_id = f"scoring_{uuid.uuid4().hex}"
        weights = framework.weights_for(request.craft_type)
        logger.info(
            "Starting project scoring: scoring_id=%s project_id=%s craft_type=%s",
            scoring_id, request.project_id, request.craft_type.value,
        )

        context = build_context(request)

        assessments = await self._evaluate_all(request, context, weights)
        scores = {kind: assessments[kind].score for kind in CriterionKind}

        skill_score = framework.aggregate(scores, request.craft_type)
        skill_level = framework.skill_level_for(skill_score)

        ordered = [assessments[kind] for kind in CriterionKind]
        confidence = overall_confidence(ordered)
        needs_review, review_reason = review_decision(ordered, confidence)

        feedback, _ = await generate_feedback(
            self.oracle,
            request,
            context,
            skill_score,
            scores,
            timeout_seconds=self.feedback_timeout_seconds,
        )

        processing_time_ms = int((time.perf_counter() - start) * 1000)
        criteria = ScoringCriteria(
            **{
                kind.value: ScoringCriterion(
                    score=assessments[kind].score,
                    weight=weights[kind],
                    feedback=assessments[kind].feedback,
                    confidence=assessments[kind].confidence,
                )
                for kind in CriterionKind
            }
        )

        result = ProjectScoringResult(
            scoring_id=scoring_id,
            project_id=request.project_id,
            user_id=request.user_id,
            individual_skill_score=skill_score,
            skill_level_category=skill_level,
            scoring_criteria=criteria,
            overall_feedback=feedback.overall_feedback,
            strengths=feedback.strengths,
            improvement_areas=feedback.improvement_areas,
            next_step_suggestions=feedback.next_step_suggestions,
            ai_scoring_metadata=AIScoringMetadata(
                model_version=self.model_version,
                confidence=confidence,
                processing_time_ms=processing_time_ms,
                timestamp=datetime.now(timezone.utc),
                needs_human_review=needs_review,
                review_reason=review_reason,
                craft_type_specific=craft_profiles.craft_metadata(request.craft_type),
                documentation_analysis=framework.analyze_documentation(request),
            ),
        )

        logger.info(
            "Project scoring completed in %dms: scoring_id=%s score=%d level=%s confidence=%d needs_review=%s",
            processing_time_ms, scoring_id, skill_score, skill_level.value, confidence, needs_review,
        )
        return result

    async def _evaluate_all(
        self,
        request: ProjectScoringRequest,
        context: ScoringContext,
        weights: dict[CriterionKind, float],
    ) -> dict[CriterionKind, CriterionAssessment]:
        """Run all criterion evaluations concurrently and wait for every one."""
        async with asyncio.TaskGroup() as group:
            tasks = {
                kind: group.create_task(
                    self.evaluators[kind].evaluate(request, context, weights[kind])
                )
                for kind in CriterionKind
            }
        return {kind: task.result() for kind, task in tasks.items()}
