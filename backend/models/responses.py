from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.schemas.enums import CraftType, CriterionKind, SkillLevel


class ScoringCriterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    weight: float = Field(..., ge=0, le=1)
    feedback: str = ""
    confidence: int = Field(..., ge=0, le=100)


class ScoringCriteria(BaseModel):
    """The five criterion records of one scored project."""

    model_config = ConfigDict(frozen=True)

    technical_execution: ScoringCriterion
    documentation_completeness: ScoringCriterion
    tool_usage_appropriateness: ScoringCriterion
    safety_adherence: ScoringCriterion
    innovation_creativity: ScoringCriterion

    def get(self, kind: CriterionKind) -> ScoringCriterion:
        return getattr(self, kind.value)

    def items(self) -> list[tuple[CriterionKind, ScoringCriterion]]:
        return [(kind, self.get(kind)) for kind in CriterionKind]


class DocumentationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_before_photos: bool = False
    has_process_photos: bool = False
    has_after_photos: bool = False
    has_description: bool = False
    has_materials_list: bool = False
    has_tools_list: bool = False
    has_time_tracking: bool = False
    has_challenges_noted: bool = False
    completeness: int = 0  # 0-100


class CraftTypeMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    craft_type: CraftType
    evaluation_focus: list[str] = []
    common_challenges: list[str] = []


class AIScoringMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    model_version: str = ""
    confidence: int = Field(..., ge=0, le=100)
    processing_time_ms: int = 0
    timestamp: datetime
    needs_human_review: bool = False
    review_reason: str | None = None
    craft_type_specific: CraftTypeMetadata
    documentation_analysis: DocumentationAnalysis


class ProjectFeedback(BaseModel):
    overall_feedback: str = ""
    strengths: list[str] = []
    improvement_areas: list[str] = []
    next_step_suggestions: list[str] = []


class ProjectScoringResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scoring_id: str
    project_id: str
    user_id: str
    individual_skill_score: int = Field(..., ge=0, le=100)
    skill_level_category: SkillLevel
    scoring_criteria: ScoringCriteria
    overall_feedback: str = ""
    strengths: list[str] = []
    improvement_areas: list[str] = []
    next_step_suggestions: list[str] = []
    ai_scoring_metadata: AIScoringMetadata

    @property
    def feedback(self) -> ProjectFeedback:
        return ProjectFeedback(
            overall_feedback=self.overall_feedback,
            strengths=list(self.strengths),
            improvement_areas=list(self.improvement_areas),
            next_step_suggestions=list(self.next_step_suggestions),
        )
