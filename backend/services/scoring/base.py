"""Oracle protocol and abstract base class for all criterion evaluators."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Protocol

from models.requests import ProjectScoringRequest
from models.schemas.criterion import CriterionAssessment, OracleReply, ScoringContext
from models.schemas.enums import CriterionKind
from services.scoring.reply_parser import parse_criterion_reply

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 70
FALLBACK_CONFIDENCE = 40


class Oracle(Protocol):
    """Text/vision generation dependency. Returns None when it has nothing usable."""

    async def generate(self, prompt: str, context: ScoringContext) -> OracleReply | None: ...


def fallback_assessment(criterion: CriterionKind) -> CriterionAssessment:
    """Neutral, low-confidence stand-in for a criterion the oracle could not evaluate."""
    return CriterionAssessment(
        criterion=criterion,
        score=FALLBACK_SCORE,
        feedback=f"{criterion.label.capitalize()} evaluation unavailable",
        confidence=FALLBACK_CONFIDENCE,
        used_fallback=True,
    )


class BaseCriterionEvaluator(ABC):
    """Base class for criterion evaluators.

    Subclasses must implement:
        - criterion: the CriterionKind they score
        - build_prompt(request, weight): the oracle prompt for this criterion

    evaluate() never raises for oracle trouble: a failed, empty, or slow
    oracle call resolves to fallback_assessment().
    """

    criterion: CriterionKind

    def __init__(self, oracle: Oracle, timeout_seconds: float = 30.0) -> None:
        self.oracle = oracle
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def build_prompt(self, request: ProjectScoringRequest, weight: float) -> str:
        """Criterion-specific evaluation prompt."""

    def postprocess(
        self,
        request: ProjectScoringRequest,
        assessment: CriterionAssessment,
    ) -> CriterionAssessment:
        """Hook for evaluators that adjust the parsed oracle assessment."""
        return assessment

    async def evaluate(
        self,
        request: ProjectScoringRequest,
        context: ScoringContext,
        weight: float,
    ) -> CriterionAssessment:
        prompt = self.build_prompt(request, weight)
        try:
            reply = await asyncio.wait_for(
                self.oracle.generate(prompt, context),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "%s evaluation timed out after %.1fs, using fallback",
                self.criterion.value, self.timeout_seconds,
            )
            return fallback_assessment(self.criterion)
        except Exception as e:
            logger.warning("%s evaluation failed, using fallback: %s", self.criterion.value, e)
            return fallback_assessment(self.criterion)

        if reply is None or not reply.text.strip():
            logger.warning("%s evaluation got no oracle reply, using fallback", self.criterion.value)
            return fallback_assessment(self.criterion)

        assessment = parse_criterion_reply(
            self.criterion, reply.text, reply.self_reported_confidence
        )
        return self.postprocess(request, assessment)
