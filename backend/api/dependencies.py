"""Shared dependencies for API routes."""

from dataclasses import dataclass

from fastapi import Request

from config import Settings
from services.gemini_client import GeminiOracle
from services.review_service import ManualReviewService
from services.scoring.base import Oracle
from services.scoring.orchestrator import ProjectScoringService
from services.skill_level_service import UserSkillLevelService
from services.stores import InMemoryProjectStore, InMemoryReviewStore, InMemoryUserStore
from services.submission import ProjectSubmissionFlow


@dataclass
class Services:
    """Everything the routes need, built once per process."""

    oracle: Oracle
    oracle_configured: bool
    users: InMemoryUserStore
    projects: InMemoryProjectStore
    review_store: InMemoryReviewStore
    scoring: ProjectScoringService
    reviews: ManualReviewService
    skills: UserSkillLevelService
    submissions: ProjectSubmissionFlow


def build_services(settings: Settings, oracle: Oracle | None = None) -> Services:
    if oracle is None:
        gemini = GeminiOracle(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.oracle_temperature,
            max_output_tokens=settings.oracle_max_output_tokens,
        )
        oracle, configured = gemini, gemini.configured
    else:
        configured = True

    users = InMemoryUserStore()
    projects = InMemoryProjectStore()
    review_store = InMemoryReviewStore()

    scoring = ProjectScoringService(
        oracle,
        model_version=settings.gemini_model,
        criterion_timeout_seconds=settings.criterion_timeout_seconds,
        feedback_timeout_seconds=settings.feedback_timeout_seconds,
    )
    reviews = ManualReviewService(review_store)
    skills = UserSkillLevelService(users, projects)
    return Services(
        oracle=oracle,
        oracle_configured=configured,
        users=users,
        projects=projects,
        review_store=review_store,
        scoring=scoring,
        reviews=reviews,
        skills=skills,
        submissions=ProjectSubmissionFlow(scoring, reviews, skills, projects),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
