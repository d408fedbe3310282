"""Scoring framework: criterion weights, weighted aggregation, skill tiers.

Everything here is pure. Weight tables are validated at import time.
"""

import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from models.requests import ProjectScoringRequest
from models.responses import DocumentationAnalysis
from models.schemas.enums import SKILL_LEVEL_ORDER, CraftType, CriterionKind, SkillLevel
from models.schemas.skill import SkillLevelDefinition
from services.exceptions import InvalidCraftTypeError, ScoreOutOfRangeError, WeightTableError

WEIGHT_TOLERANCE = 1e-6

DEFAULT_WEIGHTS: dict[CriterionKind, float] = {
    CriterionKind.TECHNICAL_EXECUTION: 0.40,
    CriterionKind.DOCUMENTATION_COMPLETENESS: 0.30,
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: 0.15,
    CriterionKind.SAFETY_ADHERENCE: 0.10,
    CriterionKind.INNOVATION_CREATIVITY: 0.05,
}

# Hot-work crafts trade some technical weight for safety.
_HOT_WORK_WEIGHTS: dict[CriterionKind, float] = {
    CriterionKind.TECHNICAL_EXECUTION: 0.35,
    CriterionKind.DOCUMENTATION_COMPLETENESS: 0.30,
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: 0.15,
    CriterionKind.SAFETY_ADHERENCE: 0.15,
    CriterionKind.INNOVATION_CREATIVITY: 0.05,
}

CRAFT_WEIGHT_OVERRIDES: dict[CraftType, dict[CriterionKind, float]] = {
    CraftType.BLACKSMITHING: _HOT_WORK_WEIGHTS,
    CraftType.GLASSBLOWING: _HOT_WORK_WEIGHTS,
}

# Lower bound of each tier; each tier runs up to the next tier's floor.
SKILL_THRESHOLDS: dict[SkillLevel, int] = {
    SkillLevel.NOVICE: 0,
    SkillLevel.APPRENTICE: 21,
    SkillLevel.JOURNEYMAN: 41,
    SkillLevel.CRAFTSMAN: 61,
    SkillLevel.MASTER: 81,
}

SKILL_LEVEL_DEFINITIONS: dict[SkillLevel, SkillLevelDefinition] = {
    SkillLevel.NOVICE: SkillLevelDefinition(
        description="Beginning crafter learning fundamental skills",
        min_score=0,
        max_score=20,
        characteristics=[
            "Learning basic tools and techniques",
            "Following simple instructions",
            "Focus on safety and proper form",
            "Building foundational knowledge",
        ],
        expected_capabilities=[
            "Can identify basic tools",
            "Understands safety protocols",
            "Follows step-by-step instructions",
            "Produces simple functional items",
        ],
    ),
    SkillLevel.APPRENTICE: SkillLevelDefinition(
        description="Developing crafter with growing confidence",
        min_score=21,
        max_score=40,
        characteristics=[
            "Comfortable with basic techniques",
            "Beginning to understand material properties",
            "Can complete projects with minimal guidance",
            "Starting to troubleshoot problems",
        ],
        expected_capabilities=[
            "Uses tools confidently and safely",
            "Adapts techniques to different materials",
            "Plans simple projects independently",
            "Recognizes and corrects basic mistakes",
        ],
    ),
    SkillLevel.JOURNEYMAN: SkillLevelDefinition(
        description="Competent crafter with solid technical skills",
        min_score=41,
        max_score=60,
        characteristics=[
            "Proficient in multiple techniques",
            "Good understanding of materials and processes",
            "Can design and execute original projects",
            "Shares knowledge with others",
        ],
        expected_capabilities=[
            "Masters intermediate techniques",
            "Combines multiple skills in projects",
            "Teaches basic skills to others",
            "Innovates within established methods",
        ],
    ),
    SkillLevel.CRAFTSMAN: SkillLevelDefinition(
        description="Skilled artisan with advanced expertise",
        min_score=61,
        max_score=80,
        characteristics=[
            "Expert in specialized techniques",
            "Deep understanding of craft principles",
            "Creates complex, high-quality work",
            "Mentors other crafters",
        ],
        expected_capabilities=[
            "Executes advanced techniques flawlessly",
            "Develops new approaches to problems",
            "Creates heirloom-quality pieces",
            "Leads craft communities",
        ],
    ),
    SkillLevel.MASTER: SkillLevelDefinition(
        description="Master craftsperson with exceptional skill and innovation",
        min_score=81,
        max_score=100,
        characteristics=[
            "Pushes boundaries of the craft",
            "Innovates new techniques and methods",
            "Creates museum-quality work",
            "Preserves and advances craft traditions",
        ],
        expected_capabilities=[
            "Invents new techniques",
            "Teaches advanced workshops",
            "Judges craft competitions",
            "Preserves traditional knowledge",
        ],
    ),
}

DESCRIPTION_MIN_WORDS = 30

_BEFORE_CUE = re.compile(r"\b(before|start)", re.IGNORECASE)
_PROCESS_CUE = re.compile(r"\b(process|step)", re.IGNORECASE)
_AFTER_CUE = re.compile(r"\b(after|final)", re.IGNORECASE)
_MATERIALS_LABEL = re.compile(r"\bmaterials?(\s+used)?\s*:", re.IGNORECASE)
_TOOLS_LABEL = re.compile(r"\btools?(\s+used)?\s*:", re.IGNORECASE)
_TIME_CUE = re.compile(r"\b(time|hours?|hrs?|minutes?)\b", re.IGNORECASE)
_CHALLENGE_CUE = re.compile(r"\b(challeng|problem|mistake)", re.IGNORECASE)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (78.5 -> 79)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_weights(weights: Mapping[CriterionKind, float]) -> None:
    missing = set(CriterionKind) - set(weights)
    if missing:
        raise WeightTableError(
            f"Weight table missing criteria: {sorted(k.value for k in missing)}"
        )
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise WeightTableError(f"Criterion weights sum to {total}, expected 1.0")


def _coerce_craft_type(craft_type: CraftType | str) -> CraftType:
    if isinstance(craft_type, CraftType):
        return craft_type
    try:
        return CraftType(craft_type)
    except ValueError:
        raise InvalidCraftTypeError(craft_type) from None


def weights_for(craft_type: CraftType | str) -> dict[CriterionKind, float]:
    """Criterion weights for a craft; crafts without an override use the default table."""
    craft = _coerce_craft_type(craft_type)
    weights = dict(CRAFT_WEIGHT_OVERRIDES.get(craft, DEFAULT_WEIGHTS))
    validate_weights(weights)
    return weights


def aggregate(scores: Mapping[CriterionKind, float], craft_type: CraftType | str) -> int:
    """Weighted sum of the five criterion scores, rounded and clamped to [0, 100]."""
    weights = weights_for(craft_type)
    missing = set(CriterionKind) - set(scores)
    if missing:
        raise ValueError(f"Missing criterion scores: {sorted(k.value for k in missing)}")
    weighted_sum = sum(scores[kind] * weight for kind, weight in weights.items())
    return max(0, min(100, round_half_up(weighted_sum)))


def skill_level_for(score: float) -> SkillLevel:
    """Map a 0-100 score to its tier. Out-of-range scores are a caller bug."""
    if not 0 <= score <= 100:
        raise ScoreOutOfRangeError(score)
    for level in reversed(SKILL_LEVEL_ORDER):
        if score >= SKILL_THRESHOLDS[level]:
            return level
    return SkillLevel.NOVICE


def score_variance(scores: list[float]) -> float:
    """Population variance of the criterion scores."""
    if not scores:
        return 0.0
    return float(np.var(np.asarray(scores, dtype=float)))


def analyze_documentation(request: ProjectScoringRequest) -> DocumentationAnalysis:
    """Structural documentation signals extracted from the submission."""
    text = request.description

    features = {
        "has_before_photos": bool(_BEFORE_CUE.search(text)),
        "has_process_photos": bool(_PROCESS_CUE.search(text)),
        "has_after_photos": bool(_AFTER_CUE.search(text)),
        "has_description": len(text.split()) >= DESCRIPTION_MIN_WORDS,
        "has_materials_list": bool(request.materials) or bool(_MATERIALS_LABEL.search(text)),
        "has_tools_list": bool(request.tools_used) or bool(_TOOLS_LABEL.search(text)),
        "has_time_tracking": request.time_spent is not None or bool(_TIME_CUE.search(text)),
        "has_challenges_noted": bool(_CHALLENGE_CUE.search(text)),
    }
    completed = sum(features.values())
    completeness = round_half_up(completed / len(features) * 100)
    return DocumentationAnalysis(**features, completeness=completeness)


def documentation_heuristic(request: ProjectScoringRequest) -> int:
    """Documentation completeness percentage (0-100), equal weight per signal."""
    return analyze_documentation(request).completeness


for _weights in (DEFAULT_WEIGHTS, *CRAFT_WEIGHT_OVERRIDES.values()):
    validate_weights(_weights)
