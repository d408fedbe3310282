"""The five criterion evaluators.

Each one only knows how to phrase its question to the oracle; parsing,
timeouts and fallbacks live in BaseCriterionEvaluator.
"""

import logging

from models.requests import ProjectScoringRequest
from models.schemas.criterion import CriterionAssessment
from models.schemas.enums import CriterionKind
from services import prompt_builder
from services.scoring.base import BaseCriterionEvaluator
from services.scoring.framework import analyze_documentation, round_half_up

logger = logging.getLogger(__name__)

# Share of the documentation score taken from the structural heuristic
DOCUMENTATION_HEURISTIC_SHARE = 0.3


class TechnicalExecutionEvaluator(BaseCriterionEvaluator):
    criterion = CriterionKind.TECHNICAL_EXECUTION

    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        return prompt_builder.build_technical_prompt(request, weight)


class DocumentationCompletenessEvaluator(BaseCriterionEvaluator):
    """Blends the oracle's judgment with the deterministic documentation heuristic."""

    criterion = CriterionKind.DOCUMENTATION_COMPLETENESS

    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        analysis = analyze_documentation(request)
        return prompt_builder.build_documentation_prompt(request, weight, analysis)

    def postprocess(
        self,
        request: ProjectScoringRequest,
        assessment: CriterionAssessment,
    ) -> CriterionAssessment:
        heuristic = analyze_documentation(request).completeness
        blended = round_half_up(
            (1 - DOCUMENTATION_HEURISTIC_SHARE) * assessment.score
            + DOCUMENTATION_HEURISTIC_SHARE * heuristic
        )
        logger.debug(
            "Documentation score blended: oracle=%d heuristic=%d -> %d",
            assessment.score, heuristic, blended,
        )
        return assessment.model_copy(update={"score": blended})


class ToolUsageEvaluator(BaseCriterionEvaluator):
    criterion = CriterionKind.TOOL_USAGE_APPROPRIATENESS

    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        return prompt_builder.build_tool_usage_prompt(request, weight)


class SafetyAdherenceEvaluator(BaseCriterionEvaluator):
    criterion = CriterionKind.SAFETY_ADHERENCE

    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        return prompt_builder.build_safety_prompt(request, weight)


class InnovationCreativityEvaluator(BaseCriterionEvaluator):
    criterion = CriterionKind.INNOVATION_CREATIVITY

    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        return prompt_builder.build_innovation_prompt(request, weight)
