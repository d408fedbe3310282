"""Closed vocabularies shared by every scoring contract."""

from enum import Enum


class CraftType(str, Enum):
    WOODWORKING = "woodworking"
    METALWORKING = "metalworking"
    LEATHERCRAFT = "leathercraft"
    POTTERY = "pottery"
    WEAVING = "weaving"
    BLACKSMITHING = "blacksmithing"
    BUSHCRAFT = "bushcraft"
    STONEMASONRY = "stonemasonry"
    GLASSBLOWING = "glassblowing"
    JEWELRY = "jewelry"
    GENERAL = "general"


class SkillLevel(str, Enum):
    """Ordered skill tiers, lowest first."""

    NOVICE = "novice"
    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    CRAFTSMAN = "craftsman"
    MASTER = "master"

    @property
    def rank(self) -> int:
        return SKILL_LEVEL_ORDER.index(self)

    def next_level(self) -> "SkillLevel | None":
        if self.rank == len(SKILL_LEVEL_ORDER) - 1:
            return None
        return SKILL_LEVEL_ORDER[self.rank + 1]


SKILL_LEVEL_ORDER: list[SkillLevel] = list(SkillLevel)


class CriterionKind(str, Enum):
    TECHNICAL_EXECUTION = "technical_execution"
    DOCUMENTATION_COMPLETENESS = "documentation_completeness"
    TOOL_USAGE_APPROPRIATENESS = "tool_usage_appropriateness"
    SAFETY_ADHERENCE = "safety_adherence"
    INNOVATION_CREATIVITY = "innovation_creativity"

    @property
    def label(self) -> str:
        return CRITERION_LABELS[self]


CRITERION_LABELS: dict[CriterionKind, str] = {
    CriterionKind.TECHNICAL_EXECUTION: "technical execution",
    CriterionKind.DOCUMENTATION_COMPLETENESS: "documentation completeness",
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: "tool usage",
    CriterionKind.SAFETY_ADHERENCE: "safety adherence",
    CriterionKind.INNOVATION_CREATIVITY: "innovation and creativity",
}


class ReviewStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    COMPLETED = "completed"
    REJECTED = "rejected"


class ReviewPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 0, "medium": 1, "high": 2}[self.value]


class ReviewType(str, Enum):
    AUTOMATIC = "automatic"
    USER_REQUESTED = "user_requested"
    QUALITY_ASSURANCE = "quality_assurance"
