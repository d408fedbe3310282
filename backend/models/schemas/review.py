"""Manual review queue records."""

from datetime import datetime

from pydantic import BaseModel, Field

from models.responses import ProjectFeedback, ProjectScoringResult
from models.schemas.enums import ReviewPriority, ReviewStatus, ReviewType

PERMISSION_DENIED = "permission-denied"


class ReviewMetadata(BaseModel):
    original_confidence: int = 0
    flagged_criteria: list[str] = []
    ai_model_version: str = ""
    review_type: ReviewType = ReviewType.AUTOMATIC


class ReviewRequest(BaseModel):
    id: str = ""
    project_id: str
    user_id: str
    scoring_id: str
    original_scoring_result: ProjectScoringResult
    review_reason: str
    status: ReviewStatus = ReviewStatus.PENDING
    priority: ReviewPriority = ReviewPriority.LOW
    requested_at: datetime
    assigned_reviewer_id: str | None = None
    assigned_reviewer_name: str | None = None
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    reviewer_notes: str | None = None
    revised_score: int | None = Field(None, ge=0, le=100)
    revised_feedback: ProjectFeedback | None = None
    user_requested_review: bool = False
    metadata: ReviewMetadata = ReviewMetadata()

    @property
    def is_terminal(self) -> bool:
        return self.status in (ReviewStatus.COMPLETED, ReviewStatus.REJECTED)

    @property
    def surfaced_score(self) -> int:
        """Score shown to the user: the reviewer's revision when one exists."""
        if self.revised_score is not None:
            return self.revised_score
        return self.original_scoring_result.individual_skill_score

    @property
    def surfaced_feedback(self) -> ProjectFeedback:
        if self.revised_feedback is not None:
            return self.revised_feedback
        return self.original_scoring_result.feedback


class ReviewStats(BaseModel):
    total_pending: int = 0
    total_in_review: int = 0
    total_completed: int = 0
    total_rejected: int = 0
    average_review_time: int = 0  # minutes
    high_priority_count: int = 0
