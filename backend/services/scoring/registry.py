"""Evaluator factory: one evaluator per criterion, all sharing the same oracle."""

import logging

from models.schemas.enums import CriterionKind
from services.scoring.base import BaseCriterionEvaluator, Oracle

logger = logging.getLogger(__name__)


def _create_evaluator(
    kind: CriterionKind,
    oracle: Oracle,
    timeout_seconds: float,
) -> BaseCriterionEvaluator:
    """Factory: create a criterion evaluator by kind with deferred imports."""
    if kind == CriterionKind.TECHNICAL_EXECUTION:
        from services.scoring.criteria import TechnicalExecutionEvaluator
        return TechnicalExecutionEvaluator(oracle, timeout_seconds)
    elif kind == CriterionKind.DOCUMENTATION_COMPLETENESS:
        from services.scoring.criteria import DocumentationCompletenessEvaluator
        return DocumentationCompletenessEvaluator(oracle, timeout_seconds)
    elif kind == CriterionKind.TOOL_USAGE_APPROPRIATENESS:
        from services.scoring.criteria import ToolUsageEvaluator
        return ToolUsageEvaluator(oracle, timeout_seconds)
    elif kind == CriterionKind.SAFETY_ADHERENCE:
        from services.scoring.criteria import SafetyAdherenceEvaluator
        return SafetyAdherenceEvaluator(oracle, timeout_seconds)
    elif kind == CriterionKind.INNOVATION_CREATIVITY:
        from services.scoring.criteria import InnovationCreativityEvaluator
        return InnovationCreativityEvaluator(oracle, timeout_seconds)
    else:
        raise ValueError(f"Unknown criterion: {kind}")


def build_evaluators(
    oracle: Oracle,
    timeout_seconds: float = 30.0,
) -> dict[CriterionKind, BaseCriterionEvaluator]:
    """Create the full evaluator set, keyed by criterion."""
    evaluators = {kind: _create_evaluator(kind, oracle, timeout_seconds) for kind in CriterionKind}
    logger.debug("Built %d criterion evaluators", len(evaluators))
    return evaluators
