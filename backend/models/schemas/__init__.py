"""Pydantic contracts shared by the scoring engine and the skill service."""

from models.schemas.criterion import CriterionAssessment, OracleReply, ScoringContext
from models.schemas.enums import CraftType, CriterionKind, ReviewPriority, ReviewStatus, SkillLevel
from models.schemas.skill import SkillCalculation, SkillLevelUpdate, SkillProgressionEntry, User

__all__ = [
    "CriterionAssessment",
    "OracleReply",
    "ScoringContext",
    "CraftType",
    "CriterionKind",
    "ReviewPriority",
    "ReviewStatus",
    "SkillLevel",
    "SkillCalculation",
    "SkillLevelUpdate",
    "SkillProgressionEntry",
    "User",
]
