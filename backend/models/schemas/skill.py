"""User skill-level contracts: stored scoring state, ledger entries, calculations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.schemas.enums import SkillLevel


class SkillProgressionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_level: SkillLevel
    average_score: float  # the recency-weighted average that triggered this level
    achieved_at: datetime
    project_count: int
    trigger_project_id: str | None = None


class UserScoring(BaseModel):
    average_project_score: float = 0.0
    calculated_skill_level: SkillLevel = SkillLevel.NOVICE
    project_count: int = 0
    skill_progression: list[SkillProgressionEntry] = []
    last_score_update: datetime | None = None


class User(BaseModel):
    id: str
    display_name: str = ""
    scoring: UserScoring | None = None


class ScoredProject(BaseModel):
    """Project-store view of one scored project, enough for recency ordering."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    user_id: str
    scoring_id: str = ""
    individual_skill_score: int = Field(..., ge=0, le=100)
    created_at: datetime


class SkillCalculation(BaseModel):
    skill_level: SkillLevel
    average_score: float
    project_count: int
    confidence: float  # 0-1
    progression_history: list[SkillProgressionEntry] = []


class SkillLevelChangedEvent(BaseModel):
    old_level: SkillLevel
    new_level: SkillLevel
    average_score: float


class SkillLevelUpdate(BaseModel):
    level_changed: bool
    old_level: SkillLevel | None = None  # only set when the level changed
    new_level: SkillLevel
    average_score: float

    def changed_event(self) -> SkillLevelChangedEvent | None:
        if not self.level_changed or self.old_level is None:
            return None
        return SkillLevelChangedEvent(
            old_level=self.old_level,
            new_level=self.new_level,
            average_score=self.average_score,
        )


class LevelProgress(BaseModel):
    progress_percentage: float
    points_to_next: float
    next_level_threshold: int


class SkillLevelBadge(BaseModel):
    title: str
    description: str
    next_level: SkillLevel | None = None


class SkillLevelDefinition(BaseModel):
    description: str
    min_score: int
    max_score: int
    characteristics: list[str] = []
    expected_capabilities: list[str] = []
