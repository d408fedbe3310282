"""Narrative feedback: oracle-written when possible, template-built otherwise."""

import asyncio
import logging

from models.requests import ProjectScoringRequest
from models.responses import ProjectFeedback
from models.schemas.criterion import ScoringContext
from models.schemas.enums import CriterionKind
from services import prompt_builder
from services.scoring.base import Oracle
from services.scoring.reply_parser import parse_feedback_reply

logger = logging.getLogger(__name__)

FALLBACK_OVERALL_FEEDBACK = (
    "This project demonstrates solid craft fundamentals with clear areas for continued development."
)

# Template advice per criterion, used when the weakest criterion is known
_IMPROVEMENT_TEMPLATES: dict[CriterionKind, str] = {
    CriterionKind.TECHNICAL_EXECUTION: "Refine precision and finishing quality in your technique",
    CriterionKind.DOCUMENTATION_COMPLETENESS: "Enhanced documentation with more process photos",
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: "Expanded tool usage exploration",
    CriterionKind.SAFETY_ADHERENCE: "Increased focus on safety practices",
    CriterionKind.INNOVATION_CREATIVITY: "Experiment with original design elements",
}


def top_criterion(scores: dict[CriterionKind, int]) -> CriterionKind:
    """Highest-scoring criterion; ties go to the more heavily weighted (earlier) one."""
    return max(CriterionKind, key=lambda kind: (scores[kind], -list(CriterionKind).index(kind)))


def fallback_feedback(scores: dict[CriterionKind, int]) -> ProjectFeedback:
    """Deterministic feedback built from the criterion scores alone."""
    best = top_criterion(scores)
    weakest = sorted(CriterionKind, key=lambda kind: scores[kind])
    improvements = [_IMPROVEMENT_TEMPLATES[kind] for kind in weakest if kind != best][:3]

    return ProjectFeedback(
        overall_feedback=FALLBACK_OVERALL_FEEDBACK,
        strengths=[
            f"Strong performance in {best.label}",
            "Good attention to craft fundamentals",
            "Clear documentation of the process",
        ],
        improvement_areas=improvements,
        next_step_suggestions=[
            "Try a similar project with increased complexity",
            "Focus on documenting your process more thoroughly",
            "Explore advanced techniques in your craft specialization",
        ],
    )


async def generate_feedback(
    oracle: Oracle,
    request: ProjectScoringRequest,
    context: ScoringContext,
    overall_score: int,
    scores: dict[CriterionKind, int],
    timeout_seconds: float = 30.0,
) -> tuple[ProjectFeedback, bool]:
    """Ask the oracle for narrative feedback.

    Returns (feedback, used_fallback). Never raises for oracle trouble.
    """
    prompt = prompt_builder.build_feedback_prompt(request, overall_score, scores)
    try:
        reply = await asyncio.wait_for(oracle.generate(prompt, context), timeout=timeout_seconds)
    except TimeoutError:
        logger.warning("Feedback generation timed out, using structured fallback")
        return fallback_feedback(scores), True
    except Exception as e:
        logger.warning("Feedback generation failed, using structured fallback: %s", e)
        return fallback_feedback(scores), True

    parsed = parse_feedback_reply(reply.text) if reply is not None else None
    if parsed is None:
        logger.warning("Feedback reply unusable, using structured fallback")
        return fallback_feedback(scores), True
    return parsed, False
