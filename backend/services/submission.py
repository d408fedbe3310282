"""Post-creation flow: score, persist, escalate, update the user's level."""

import logging

from pydantic import BaseModel

from models.requests import ProjectScoringRequest
from models.responses import ProjectScoringResult
from models.schemas.skill import SkillLevelChangedEvent, SkillLevelUpdate
from services.review_service import ManualReviewService
from services.scoring.orchestrator import ProjectScoringService
from services.skill_level_service import UserSkillLevelService
from services.stores import ProjectStore

logger = logging.getLogger(__name__)

SCORING_UNAVAILABLE_MESSAGE = "Scoring unavailable, you can view your history later"


class SubmissionOutcome(BaseModel):
    scoring_available: bool = True
    message: str | None = None
    result: ProjectScoringResult | None = None
    review_id: str | None = None
    skill_update: SkillLevelUpdate | None = None
    skill_level_event: SkillLevelChangedEvent | None = None


class ProjectSubmissionFlow:
    def __init__(
        self,
        scoring: ProjectScoringService,
        reviews: ManualReviewService,
        skills: UserSkillLevelService,
        projects: ProjectStore,
    ) -> None:
        self.scoring = scoring
        self.reviews = reviews
        self.skills = skills
        self.projects = projects

    async def submit(self, request: ProjectScoringRequest) -> SubmissionOutcome:
        """Run everything that follows a new project post.

        A scoring failure never fails the post: the outcome says scoring is
        unavailable instead. Store failures after scoring propagate.
        """
        try:
            result = await self.scoring.score_project(request)
        except Exception:
            logger.exception("Scoring failed for project %s", request.project_id)
            return SubmissionOutcome(scoring_available=False, message=SCORING_UNAVAILABLE_MESSAGE)

        await self.projects.save_result(result)

        review_id = None
        if result.ai_scoring_metadata.needs_human_review:
            review_id = await self.reviews.submit_for_review(result)

        skill_update = await self.skills.update_user_skill_level(request.user_id, request.project_id)
        return SubmissionOutcome(
            result=result,
            review_id=review_id,
            skill_update=skill_update,
            skill_level_event=skill_update.changed_event(),
        )
