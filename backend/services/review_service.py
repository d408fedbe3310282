"""Manual review queue.

States: pending -> in_review -> completed, plus pending -> rejected.
Completed and rejected are terminal.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

import numpy as np

from models.responses import ProjectFeedback, ProjectScoringResult
from models.schemas.enums import ReviewPriority, ReviewStatus, ReviewType
from models.schemas.review import (
    PERMISSION_DENIED,
    ReviewMetadata,
    ReviewRequest,
    ReviewStats,
)
from services.exceptions import InvalidReviewTransitionError, PermissionDeniedError
from services.scoring.framework import round_half_up
from services.stores import ReviewStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ReviewStatus, set[ReviewStatus]] = {
    ReviewStatus.PENDING: {ReviewStatus.IN_REVIEW, ReviewStatus.REJECTED},
    ReviewStatus.IN_REVIEW: {ReviewStatus.COMPLETED},
    ReviewStatus.COMPLETED: set(),
    ReviewStatus.REJECTED: set(),
}

FLAGGED_CRITERION_CONFIDENCE = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_priority(result: ProjectScoringResult, user_requested: bool) -> ReviewPriority:
    if user_requested:
        return ReviewPriority.HIGH

    confidence = result.ai_scoring_metadata.confidence
    score = result.individual_skill_score
    if confidence < 50 or score < 30 or score > 95:
        return ReviewPriority.HIGH
    if confidence < 70:
        return ReviewPriority.MEDIUM
    return ReviewPriority.LOW


def flagged_criteria(result: ProjectScoringResult) -> list[str]:
    """Keys of the criteria whose confidence is below 60."""
    return [
        kind.value
        for kind, criterion in result.scoring_criteria.items()
        if criterion.confidence < FLAGGED_CRITERION_CONFIDENCE
    ]


def _queue_order(review: ReviewRequest) -> tuple[int, datetime]:
    return (-review.priority.rank, review.requested_at)


class ManualReviewService:
    def __init__(self, store: ReviewStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self.clock = clock

    async def submit_for_review(
        self,
        result: ProjectScoringResult,
        user_requested: bool = False,
        notes: str | None = None,
    ) -> str:
        """Queue a scored project for human review.

        Returns the new request id, or PERMISSION_DENIED when the store
        refuses the write. Other store failures propagate.
        """
        if user_requested:
            reason = f"User requested manual review: {notes or 'No additional notes'}"
        else:
            reason = result.ai_scoring_metadata.review_reason or "AI flagged for review"

        review = ReviewRequest(
            project_id=result.project_id,
            user_id=result.user_id,
            scoring_id=result.scoring_id,
            original_scoring_result=result,
            review_reason=reason,
            status=ReviewStatus.PENDING,
            priority=calculate_priority(result, user_requested),
            requested_at=self.clock(),
            user_requested_review=user_requested,
            metadata=ReviewMetadata(
                original_confidence=result.ai_scoring_metadata.confidence,
                flagged_criteria=flagged_criteria(result),
                ai_model_version=result.ai_scoring_metadata.model_version,
                review_type=ReviewType.USER_REQUESTED if user_requested else ReviewType.AUTOMATIC,
            ),
        )

        try:
            review_id = await self.store.create(review)
        except PermissionDeniedError as e:
            logger.warning(
                "Review submission for project %s denied by store, continuing without review: %s",
                result.project_id, e,
            )
            return PERMISSION_DENIED

        logger.info(
            "Review request %s submitted: project_id=%s priority=%s user_requested=%s",
            review_id, result.project_id, review.priority.value, user_requested,
        )
        return review_id

    async def assign_review(self, review_id: str, reviewer_id: str, reviewer_name: str = "") -> ReviewRequest:
        review = await self.store.get(review_id)
        self._check_transition(review, ReviewStatus.IN_REVIEW)

        updated = review.model_copy(
            update={
                "status": ReviewStatus.IN_REVIEW,
                "assigned_reviewer_id": reviewer_id,
                "assigned_reviewer_name": reviewer_name or None,
                "assigned_at": self.clock(),
            }
        )
        await self.store.update(updated)
        logger.info("Review %s assigned to %s", review_id, reviewer_id)
        return updated

    async def complete_review(
        self,
        review_id: str,
        reviewer_notes: str,
        revised_score: int | None = None,
        revised_feedback: ProjectFeedback | None = None,
    ) -> ReviewRequest:
        review = await self.store.get(review_id)
        self._check_transition(review, ReviewStatus.COMPLETED)

        update = {
            "status": ReviewStatus.COMPLETED,
            "completed_at": self.clock(),
            "reviewer_notes": reviewer_notes,
        }
        if revised_score is not None:
            update["revised_score"] = revised_score
        if revised_feedback is not None:
            update["revised_feedback"] = revised_feedback

        updated = ReviewRequest.model_validate({**review.model_dump(), **update})
        await self.store.update(updated)
        logger.info(
            "Review %s completed: revised_score=%s", review_id, revised_score,
        )
        return updated

    async def reject_review(self, review_id: str, reviewer_notes: str = "") -> ReviewRequest:
        review = await self.store.get(review_id)
        self._check_transition(review, ReviewStatus.REJECTED)

        updated = review.model_copy(
            update={
                "status": ReviewStatus.REJECTED,
                "completed_at": self.clock(),
                "reviewer_notes": reviewer_notes or None,
            }
        )
        await self.store.update(updated)
        logger.info("Review %s rejected", review_id)
        return updated

    async def get_pending_reviews(self, reviewer_id: str | None = None) -> list[ReviewRequest]:
        """Open requests, highest priority first, then oldest first.

        Without a reviewer: the unassigned pending queue. With a reviewer:
        that reviewer's pending and in-review requests.
        """
        reviews = await self.store.list_all()
        if reviewer_id is None:
            selected = [
                r for r in reviews
                if r.status == ReviewStatus.PENDING and r.assigned_reviewer_id is None
            ]
        else:
            selected = [
                r for r in reviews
                if r.assigned_reviewer_id == reviewer_id
                and r.status in (ReviewStatus.PENDING, ReviewStatus.IN_REVIEW)
            ]
        return sorted(selected, key=_queue_order)

    async def get_review_status(self, project_id: str) -> ReviewRequest | None:
        """Most recent review request for a project, if any."""
        reviews = [r for r in await self.store.list_all() if r.project_id == project_id]
        if not reviews:
            return None
        return max(reviews, key=lambda r: r.requested_at)

    async def get_review_stats(self) -> ReviewStats:
        reviews = await self.store.list_all()
        counts = {status: 0 for status in ReviewStatus}
        review_minutes = []
        for review in reviews:
            counts[review.status] += 1
            if review.status == ReviewStatus.COMPLETED and review.completed_at is not None:
                elapsed = review.completed_at - review.requested_at
                review_minutes.append(elapsed.total_seconds() / 60)

        average = float(np.mean(review_minutes)) if review_minutes else 0.0
        return ReviewStats(
            total_pending=counts[ReviewStatus.PENDING],
            total_in_review=counts[ReviewStatus.IN_REVIEW],
            total_completed=counts[ReviewStatus.COMPLETED],
            total_rejected=counts[ReviewStatus.REJECTED],
            average_review_time=round_half_up(average),
            high_priority_count=sum(1 for r in reviews if r.priority == ReviewPriority.HIGH),
        )

    @staticmethod
    def _check_transition(review: ReviewRequest, target: ReviewStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[review.status]:
            raise InvalidReviewTransitionError(review.id, review.status.value, target.value)
