"""
Reviews Router

CRUD endpoints for book reviews.

Endpoints:
- POST /reviews/ - Create a review (authenticated, one per book)
- GET /reviews/{review_id} - Get a specific review
- PUT /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Delete a review (author only)
- GET /users/{user_id}/reviews - Reviews written by a user

Business Rules:
- One review per user per book (409 on a second attempt)
- Only the review author can update or delete it
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import CurrentIdentity, DbSession
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from app.services import reviews as review_service
from app.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


@router.post(
    "/reviews/",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Review a book. Requires authentication. One review per book per user.",
    responses={409: {"description": "Book already reviewed by this user"}},
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    review_data: ReviewCreate,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewResponse:
    """
    Create a new review.

    Raises:
        NotFoundError: 404 if the book does not exist
        ConflictError: 409 if the user already reviewed this book
    """
    review = review_service.create_review(db, identity, review_data)
    return ReviewResponse.model_validate(review)


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    db: DbSession,
) -> ReviewResponse:
    return ReviewResponse.model_validate(review_service.get_review(db, review_id))


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    identity: CurrentIdentity,
) -> ReviewResponse:
    """
    Update an existing review.

    Raises:
        NotFoundError: 404 if review not found
        ForbiddenError: 403 if user is not the review author
    """
    review = review_service.update_review(db, identity, review_id, review_data)
    return ReviewResponse.model_validate(review)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete your own review. Only the review author can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    identity: CurrentIdentity,
) -> None:
    review_service.delete_review(db, identity, review_id)


@router.get(
    "/users/{user_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews by a user",
    description="All reviews written by a user, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: int,
    db: DbSession,
) -> list[ReviewResponse]:
    reviews = review_service.list_reviews_by_user(db, user_id)
    return [ReviewResponse.model_validate(review) for review in reviews]
