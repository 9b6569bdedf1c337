"""
Reviews Service

Review operations with uniqueness and author-scoped mutation.

Business Rules:
- A review needs an existing book, a 1-5 rating and a non-blank comment
- One review per user per book
- Only the review author can update or delete a review

The duplicate check runs before the insert for a clear error, but the
guarantee comes from the uq_review_book_user constraint: two concurrent
submissions that both pass the check cannot both commit, and the loser
gets the same ConflictError.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Review
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services.books import get_book
from app.services.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.services.identity import Identity
from app.services.persistence import committing
from app.utils.pagination import fits_sql_integer
from app.utils.validation import validate_payload

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "You have already reviewed this book"


# =============================================================================
# Reads
# =============================================================================


def _ordering(newest_first: bool) -> tuple:
    if newest_first:
        return Review.created_at.desc(), Review.id.desc()
    return Review.created_at.asc(), Review.id.asc()


def get_review(db: Session, review_id: int) -> Review:
    """
    Get a review by ID.

    Raises:
        NotFoundError: If the review does not exist
    """
    review = db.get(Review, review_id) if fits_sql_integer(review_id) else None
    if review is None:
        raise NotFoundError(f"Review with id {review_id} not found")
    return review


def list_reviews_for_book(
    db: Session,
    book_id: int,
    newest_first: bool = True,
) -> list[Review]:
    """All reviews of a book."""
    if not fits_sql_integer(book_id):
        return []
    stmt = select(Review).where(Review.book_id == book_id).order_by(*_ordering(newest_first))
    return list(db.execute(stmt).scalars().all())


def list_reviews_by_user(
    db: Session,
    user_id: int,
    newest_first: bool = True,
) -> list[Review]:
    """All reviews written by a user."""
    if not fits_sql_integer(user_id):
        return []
    stmt = select(Review).where(Review.user_id == user_id).order_by(*_ordering(newest_first))
    return list(db.execute(stmt).scalars().all())


# =============================================================================
# Mutations
# =============================================================================


def get_authored_review(
    db: Session,
    identity: Identity,
    review_id: int,
    action: str,
) -> Review:
    """
    Get a review the identity is allowed to mutate.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the identity is not the author
    """
    review = get_review(db, review_id)
    if review.user_id != identity.user_id:
        logger.warning(
            f"User {identity.user_id} denied {action} on review {review_id} "
            f"written by {review.user_id}"
        )
        raise ForbiddenError(f"Not authorized to {action} this review")
    return review


def create_review(
    db: Session,
    identity: Identity,
    data: ReviewCreate | Mapping[str, Any],
) -> Review:
    """
    Create a review of a book by identity.

    Raises:
        ValidationError: Missing field, blank comment or rating outside 1-5
        NotFoundError: If the book does not exist
        ConflictError: If identity already reviewed this book
    """
    data = validate_payload(ReviewCreate, data)
    get_book(db, data.book_id)

    existing_stmt = select(Review.id).where(
        Review.book_id == data.book_id,
        Review.user_id == identity.user_id,
    )
    if db.execute(existing_stmt).first() is not None:
        logger.warning(f"User {identity.user_id} already reviewed book {data.book_id}")
        raise ConflictError(ALREADY_REVIEWED)

    review = Review(
        book_id=data.book_id,
        user_id=identity.user_id,
        username=identity.username,
        rating=data.rating,
        comment=data.comment,
    )

    with committing(db, "create review", conflict_message=ALREADY_REVIEWED):
        db.add(review)
    db.refresh(review)

    logger.info(
        f"Review {review.id} ({review.rating}/5) on book {review.book_id} "
        f"created by user {identity.user_id}"
    )
    return review


def update_review(
    db: Session,
    identity: Identity,
    review_id: int,
    data: ReviewUpdate | Mapping[str, Any],
) -> Review:
    """
    Apply a partial update to a review written by identity.

    Raises:
        ValidationError: If a provided rating is outside 1-5 or comment blank
        NotFoundError: If the review does not exist
        ForbiddenError: If the identity is not the author
    """
    review = get_authored_review(db, identity, review_id, "edit")
    data = validate_payload(ReviewUpdate, data)

    with committing(db, "update review"):
        for field, value in data.changes().items():
            setattr(review, field, value)
    db.refresh(review)

    logger.info(f"Review {review.id} updated by user {identity.user_id}")
    return review


def delete_review(db: Session, identity: Identity, review_id: int) -> None:
    """
    Delete a review written by identity.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the identity is not the author
    """
    review = get_authored_review(db, identity, review_id, "delete")

    with committing(db, "delete review"):
        db.delete(review)

    logger.info(f"Review {review_id} deleted by user {identity.user_id}")
