"""Shared test configuration, a scripted oracle, and request fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from models.requests import ProjectScoringRequest
from models.responses import (
    AIScoringMetadata,
    CraftTypeMetadata,
    DocumentationAnalysis,
    ProjectScoringResult,
    ScoringCriteria,
    ScoringCriterion,
)
from models.schemas.criterion import OracleReply, ScoringContext
from models.schemas.enums import CraftType, CriterionKind
from services.scoring import framework

DETAILED_WOODWORKING_DESCRIPTION = (
    "Before cutting anything I sketched a small walnut side table and planned each step of the "
    "build. The legs were tapered on the bandsaw and cleaned up with a hand plane, then I laid out "
    "the mortise and tenon joints with a marking gauge. Tools used: chisel, mallet, marking gauge, "
    "hand plane and a block plane for the chamfers. Each mortise was chopped by hand, checking the "
    "walls with a square as I went, and the tenons were pared until they slid home with light hand "
    "pressure. The top was glued up from three boards, flattened, and given a small bevel on the "
    "underside so it looks lighter. After glue up I sanded through the grits to 220 and applied "
    "three coats of hardwax oil, buffing between coats. The whole build took about fourteen hours "
    "over two weekends and the joints came out tight and square."
)

TAGGED_FEEDBACK_REPLY = """SUMMARY: A clean, well-executed side table with tight joinery.
STRENGTHS:
- Tight mortise and tenon joints
- Even oil finish
- Clear write-up of the build
IMPROVEMENTS:
- Add process photos
- Account for wood movement in the top
- List the lumber and finish used
NEXT STEPS:
- Add a drawer to the next table
- Try hand-cut dovetails
- Build a matching chair"""


def criterion_reply(score: int, confidence: int, feedback: str = "Solid work overall.") -> str:
    return f"SCORE: {score} | FEEDBACK: {feedback} | CONFIDENCE: {confidence}"


def criterion_of(prompt: str) -> CriterionKind | None:
    """Which criterion a prompt evaluates, or None for the narrative feedback prompt."""
    for kind in CriterionKind:
        if prompt.startswith(f"Evaluate the {kind.label} of this"):
            return kind
    return None


class FakeOracle:
    """Scripted oracle.

    Each scripted value is a reply text, None (no usable reply), or an
    exception instance to raise. Criteria without a script get ``default``.
    """

    def __init__(
        self,
        criteria: dict[CriterionKind, str | Exception | None] | None = None,
        default: str | Exception | None = criterion_reply(80, 90),
        feedback: str | Exception | None = TAGGED_FEEDBACK_REPLY,
        delays: dict[CriterionKind, float] | None = None,
        self_reported_confidence: int = 85,
    ):
        self.criteria = criteria or {}
        self.default = default
        self.feedback = feedback
        self.delays = delays or {}
        self.self_reported_confidence = self_reported_confidence
        self.prompts: list[str] = []
        self.contexts: list[ScoringContext] = []

    async def generate(self, prompt: str, context: ScoringContext) -> OracleReply | None:
        self.prompts.append(prompt)
        self.contexts.append(context)
        kind = criterion_of(prompt)

        if kind is not None and kind in self.delays:
            await asyncio.sleep(self.delays[kind])

        if kind is None:
            scripted = self.feedback
        else:
            scripted = self.criteria.get(kind, self.default)

        if isinstance(scripted, Exception):
            raise scripted
        if scripted is None:
            return None
        return OracleReply(text=scripted, self_reported_confidence=self.self_reported_confidence)

    def criterion_prompts(self) -> list[str]:
        return [p for p in self.prompts if criterion_of(p) is not None]


class UnreachableOracle:
    async def generate(self, prompt: str, context: ScoringContext) -> OracleReply | None:
        raise ConnectionError("oracle unreachable")


@pytest.fixture
def detailed_request() -> ProjectScoringRequest:
    return ProjectScoringRequest(
        project_id="proj-1",
        user_id="user-1",
        craft_type=CraftType.WOODWORKING,
        description=DETAILED_WOODWORKING_DESCRIPTION,
    )


@pytest.fixture
def minimal_request() -> ProjectScoringRequest:
    return ProjectScoringRequest(
        project_id="proj-2",
        user_id="user-2",
        craft_type=CraftType.POTTERY,
        description="A small bowl.",
    )


def make_result(
    score: int = 75,
    confidence: int = 85,
    criterion_confidences: dict[CriterionKind, int] | None = None,
    project_id: str = "proj-1",
    user_id: str = "user-1",
    scoring_id: str | None = None,
    needs_review: bool = False,
    review_reason: str | None = None,
    timestamp: datetime | None = None,
) -> ProjectScoringResult:
    """A scored project built directly, without running the scoring service."""
    criterion_confidences = criterion_confidences or {}
    weights = framework.weights_for(CraftType.WOODWORKING)
    criteria = ScoringCriteria(
        **{
            kind.value: ScoringCriterion(
                score=score,
                weight=weights[kind],
                feedback=f"{kind.label} feedback",
                confidence=criterion_confidences.get(kind, confidence),
            )
            for kind in CriterionKind
        }
    )
    return ProjectScoringResult(
        scoring_id=scoring_id or f"scoring-{project_id}",
        project_id=project_id,
        user_id=user_id,
        individual_skill_score=score,
        skill_level_category=framework.skill_level_for(score),
        scoring_criteria=criteria,
        overall_feedback="Nice work.",
        strengths=["Neat"],
        improvement_areas=["Photos"],
        next_step_suggestions=["Keep going"],
        ai_scoring_metadata=AIScoringMetadata(
            model_version="gemini-test",
            confidence=confidence,
            timestamp=timestamp or datetime(2026, 1, 1, tzinfo=timezone.utc),
            needs_human_review=needs_review,
            review_reason=review_reason,
            craft_type_specific=CraftTypeMetadata(craft_type=CraftType.WOODWORKING),
            documentation_analysis=DocumentationAnalysis(),
        ),
    )


class FakeClock:
    """Deterministic clock advancing by a fixed step on every read."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current
