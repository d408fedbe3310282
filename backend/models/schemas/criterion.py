"""Contracts between the scoring orchestrator, criterion evaluators and the oracle."""

from pydantic import BaseModel, ConfigDict, Field

from models.schemas.enums import CraftType, CriterionKind


class UserContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    craft_specialization: list[str] = []
    skill_level: str = "apprentice"
    bio: str | None = None


class ProjectContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    craft_type: CraftType = CraftType.GENERAL
    difficulty: str = "beginner"
    materials: list[str] = []
    techniques: list[str] = []


class ScoringContext(BaseModel):
    """Shared context built once per scoring pass and handed to every oracle call."""

    model_config = ConfigDict(frozen=True)

    user_profile: UserContext = UserContext()
    current_project: ProjectContext = ProjectContext()


class OracleReply(BaseModel):
    """Raw oracle output: free text plus the oracle's own confidence (0-100)."""

    text: str
    self_reported_confidence: int = Field(85, ge=0, le=100)


class CriterionAssessment(BaseModel):
    """One criterion's evaluation before weighting."""

    model_config = ConfigDict(frozen=True)

    criterion: CriterionKind
    score: int = Field(..., ge=0, le=100)
    feedback: str = ""
    confidence: int = Field(..., ge=0, le=100)
    used_fallback: bool = False
