from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import Services, get_services
from models.requests import (
    AssignReviewRequest,
    CompleteReviewRequest,
    ProjectScoringRequest,
    RejectReviewRequest,
    ReviewSubmitRequest,
)
from models.schemas.review import ReviewRequest, ReviewStats
from models.schemas.skill import User
from services.exceptions import (
    InvalidReviewTransitionError,
    ReviewNotFoundError,
    ScoringResultNotFoundError,
    UserNotFoundError,
)
from services.skill_level_service import calculate_progress_to_next_level, skill_level_badge
from services.submission import SubmissionOutcome

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health(services: Services = Depends(get_services)):
    return {
        "status": "ok",
        "oracle_configured": services.oracle_configured,
    }


@router.post("/projects/score", response_model=SubmissionOutcome)
@limiter.limit("10/minute")
async def score_project(
    request: Request,
    body: ProjectScoringRequest,
    services: Services = Depends(get_services),
):
    try:
        await services.users.get_user(body.user_id)
    except UserNotFoundError:
        services.users.add_user(User(id=body.user_id))

    return await services.submissions.submit(body)


@router.get("/projects/{project_id}/review", response_model=ReviewRequest)
async def project_review(project_id: str, services: Services = Depends(get_services)):
    review = await services.reviews.get_review_status(project_id)
    if review is None:
        raise HTTPException(status_code=404, detail=f"No review request for project {project_id}")
    return review


@router.post("/reviews")
async def request_review(body: ReviewSubmitRequest, services: Services = Depends(get_services)):
    try:
        result = await services.projects.get_result(body.scoring_id)
    except ScoringResultNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    review_id = await services.reviews.submit_for_review(result, user_requested=True, notes=body.notes)
    return {"review_id": review_id}


@router.get("/reviews/pending", response_model=list[ReviewRequest])
async def pending_reviews(reviewer_id: str | None = None, services: Services = Depends(get_services)):
    return await services.reviews.get_pending_reviews(reviewer_id)


@router.get("/reviews/stats", response_model=ReviewStats)
async def review_stats(services: Services = Depends(get_services)):
    return await services.reviews.get_review_stats()


@router.post("/reviews/{review_id}/assign", response_model=ReviewRequest)
async def assign_review(
    review_id: str,
    body: AssignReviewRequest,
    services: Services = Depends(get_services),
):
    try:
        return await services.reviews.assign_review(review_id, body.reviewer_id, body.reviewer_name)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReviewTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/reviews/{review_id}/complete", response_model=ReviewRequest)
async def complete_review(
    review_id: str,
    body: CompleteReviewRequest,
    services: Services = Depends(get_services),
):
    try:
        return await services.reviews.complete_review(
            review_id,
            body.reviewer_notes,
            revised_score=body.revised_score,
            revised_feedback=body.revised_feedback,
        )
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReviewTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/reviews/{review_id}/reject", response_model=ReviewRequest)
async def reject_review(
    review_id: str,
    body: RejectReviewRequest,
    services: Services = Depends(get_services),
):
    try:
        return await services.reviews.reject_review(review_id, body.reviewer_notes)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReviewTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/users/{user_id}/skill-level")
async def user_skill_level(user_id: str, services: Services = Depends(get_services)):
    try:
        calculation = await services.skills.calculate_user_skill_level(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "calculation": calculation,
        "progress": calculate_progress_to_next_level(calculation.average_score, calculation.skill_level),
        "badge": skill_level_badge(calculation.skill_level),
    }
