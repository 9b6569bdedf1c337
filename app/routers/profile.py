"""
Profile Router

Endpoints:
- GET /profile/ - The current user's books, reviews and rating statistics
"""

from fastapi import APIRouter, Request

from app.config import get_settings
from app.dependencies import CurrentIdentity, DbSession
from app.schemas.profile import ProfileResponse
from app.services.profile import build_profile
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
    responses={
        401: {"description": "Not authenticated"},
    },
)


@router.get(
    "/",
    response_model=ProfileResponse,
    summary="Get current user profile",
    description=(
        "Books you own with their ratings and reviews, reviews you wrote, "
        "reviews you received and rating distributions."
    ),
)
@limiter.limit(settings.rate_limit_default)
def get_profile(
    request: Request,
    db: DbSession,
    identity: CurrentIdentity,
) -> ProfileResponse:
    return ProfileResponse.model_validate(build_profile(db, identity))
