"""Store interfaces the engine depends on, plus in-memory implementations.

The HTTP app and the tests run on the in-memory stores. A persistent backend
only has to satisfy the three Protocols below.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Protocol

from models.responses import ProjectScoringResult
from models.schemas.review import ReviewRequest
from models.schemas.skill import ScoredProject, User, UserScoring
from services.exceptions import (
    PermissionDeniedError,
    ReviewNotFoundError,
    ScoringResultNotFoundError,
    UserNotFoundError,
)


class UserStore(Protocol):
    async def get_user(self, user_id: str) -> User: ...

    async def update_scoring(self, user_id: str, scoring: UserScoring) -> None: ...


class ProjectStore(Protocol):
    async def save_result(
        self, result: ProjectScoringResult, created_at: datetime | None = None
    ) -> None: ...

    async def get_result(self, scoring_id: str) -> ProjectScoringResult: ...

    async def get_scored_projects_for_user(self, user_id: str) -> list[ScoredProject]: ...


class ReviewStore(Protocol):
    async def create(self, review: ReviewRequest) -> str: ...

    async def get(self, review_id: str) -> ReviewRequest: ...

    async def update(self, review: ReviewRequest) -> None: ...

    async def list_all(self) -> list[ReviewRequest]: ...


class InMemoryUserStore:
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def add_user(self, user: User) -> None:
        self._users[user.id] = user

    async def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.model_copy(deep=True)

    async def update_scoring(self, user_id: str, scoring: UserScoring) -> None:
        """Replace the user's scoring record in one step."""
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        self._users[user_id] = user.model_copy(update={"scoring": scoring.model_copy(deep=True)})


class InMemoryProjectStore:
    def __init__(self) -> None:
        self._results: dict[str, ProjectScoringResult] = {}
        self._created_at: dict[str, datetime] = {}

    async def save_result(
        self, result: ProjectScoringResult, created_at: datetime | None = None
    ) -> None:
        self._results[result.scoring_id] = result
        self._created_at[result.scoring_id] = created_at or result.ai_scoring_metadata.timestamp

    async def get_result(self, scoring_id: str) -> ProjectScoringResult:
        result = self._results.get(scoring_id)
        if result is None:
            raise ScoringResultNotFoundError(scoring_id)
        return result

    async def get_scored_projects_for_user(self, user_id: str) -> list[ScoredProject]:
        return [
            ScoredProject(
                project_id=result.project_id,
                user_id=result.user_id,
                scoring_id=result.scoring_id,
                individual_skill_score=result.individual_skill_score,
                created_at=self._created_at[scoring_id],
            )
            for scoring_id, result in self._results.items()
            if result.user_id == user_id
        ]


class InMemoryReviewStore:
    """Review requests kept in a dict.

    Setting deny_writes makes create() raise PermissionDeniedError, the way a
    store with restrictive access rules would.
    """

    def __init__(self, deny_writes: bool = False) -> None:
        self._reviews: dict[str, ReviewRequest] = {}
        self._lock = asyncio.Lock()
        self.deny_writes = deny_writes

    async def create(self, review: ReviewRequest) -> str:
        if self.deny_writes:
            raise PermissionDeniedError("Missing or insufficient permissions")
        async with self._lock:
            review_id = review.id or f"review_{uuid.uuid4().hex}"
            self._reviews[review_id] = review.model_copy(update={"id": review_id})
        return review_id

    async def get(self, review_id: str) -> ReviewRequest:
        review = self._reviews.get(review_id)
        if review is None:
            raise ReviewNotFoundError(review_id)
        return review.model_copy(deep=True)

    async def update(self, review: ReviewRequest) -> None:
        async with self._lock:
            if review.id not in self._reviews:
                raise ReviewNotFoundError(review.id)
            self._reviews[review.id] = review

    async def list_all(self) -> list[ReviewRequest]:
        return [review.model_copy(deep=True) for review in self._reviews.values()]
