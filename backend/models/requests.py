from pydantic import BaseModel, ConfigDict, Field

from models.responses import ProjectFeedback
from models.schemas.enums import CraftType, SkillLevel


class UserProfileSnippet(BaseModel):
    model_config = ConfigDict(frozen=True)

    bio: str | None = None
    craft_specialization: list[CraftType] = []


class ProjectScoringRequest(BaseModel):
    """A project submission handed over by the post-creation flow."""

    model_config = ConfigDict(frozen=True)

    project_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    craft_type: CraftType
    description: str = Field(..., max_length=20000, description="Free-text project write-up")
    materials: list[str] = []
    tools_used: list[str] = []
    time_spent: int | None = Field(None, ge=0, description="Minutes spent on the project")
    image_urls: list[str] = []
    user_skill_level: SkillLevel | None = None
    user_profile: UserProfileSnippet | None = None


class ReviewSubmitRequest(BaseModel):
    scoring_id: str
    notes: str | None = Field(None, max_length=2000)


class AssignReviewRequest(BaseModel):
    reviewer_id: str = Field(..., min_length=1)
    reviewer_name: str = ""


class CompleteReviewRequest(BaseModel):
    reviewer_notes: str = Field(..., max_length=5000)
    revised_score: int | None = Field(None, ge=0, le=100)
    revised_feedback: ProjectFeedback | None = None


class RejectReviewRequest(BaseModel):
    reviewer_notes: str = Field("", max_length=5000)
