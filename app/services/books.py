"""
Books Service

Catalog operations with ownership-scoped mutation.

Rules:
======
- Anyone may list and read books. Listings are newest first and every
  book is enriched with its average rating and review count.
- Only an authenticated identity may create a book; it becomes the owner.
- Only the owner may update or delete a book.
- Deleting a book deletes all of its reviews in the same transaction.
"""

import logging
from collections import defaultdict
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import Book, Review
from app.schemas.book import BookCreate, BookUpdate
from app.schemas.review import ReviewResponse
from app.services.exceptions import ForbiddenError, NotFoundError
from app.services.identity import Identity
from app.services.persistence import committing
from app.services.ratings import enrich_book
from app.utils.pagination import PageRequest, fits_sql_integer
from app.utils.validation import validate_payload

logger = logging.getLogger(__name__)


# =============================================================================
# Reads
# =============================================================================


def get_book(db: Session, book_id: int) -> Book:
    """
    Get a book by ID.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = db.get(Book, book_id) if fits_sql_integer(book_id) else None
    if book is None:
        raise NotFoundError(f"Book with id {book_id} not found")
    return book


def reviews_for_books(db: Session, book_ids: list[int]) -> dict[int, list[Review]]:
    """
    Fetch the reviews of several books in one query, newest first.

    Returns:
        Mapping of book id to its reviews (missing ids map to [])
    """
    grouped: dict[int, list[Review]] = defaultdict(list)
    if not book_ids:
        return grouped
    stmt = (
        select(Review)
        .where(Review.book_id.in_(book_ids))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    for review in db.execute(stmt).scalars():
        grouped[review.book_id].append(review)
    return grouped


def list_books(db: Session, page: PageRequest) -> dict[str, Any]:
    """
    One page of books, newest first, with rating aggregates.

    Args:
        db: Database session
        page: Parsed page/limit (see app.utils.pagination)

    Returns:
        Dict matching BookListResponse
    """
    total = db.execute(select(func.count()).select_from(Book)).scalar() or 0

    stmt = (
        select(Book)
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset(page.skip)
        .limit(page.limit)
    )
    books = db.execute(stmt).scalars().all()
    reviews = reviews_for_books(db, [book.id for book in books])

    return {
        "items": [enrich_book(book, reviews[book.id]) for book in books],
        "total": total,
        "current_page": page.page,
        "total_pages": page.total_pages(total),
        "limit": page.limit,
    }


def get_book_detail(db: Session, book_id: int) -> dict[str, Any]:
    """
    A book with its rating aggregates and all of its reviews.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = get_book(db, book_id)
    reviews = reviews_for_books(db, [book.id])[book.id]
    detail = enrich_book(book, reviews)
    detail["reviews"] = [ReviewResponse.model_validate(review) for review in reviews]
    return detail


# =============================================================================
# Ownership-gated mutations
# =============================================================================


def get_owned_book(db: Session, identity: Identity, book_id: int, action: str) -> Book:
    """
    Get a book the identity is allowed to mutate.

    Raises:
        NotFoundError: If the book does not exist
        ForbiddenError: If the identity is not the owner
    """
    book = get_book(db, book_id)
    if book.owner_id != identity.user_id:
        logger.warning(
            f"User {identity.user_id} denied {action} on book {book_id} "
            f"owned by {book.owner_id}"
        )
        raise ForbiddenError(f"Not authorized to {action} this book")
    return book


def create_book(
    db: Session,
    identity: Identity,
    data: BookCreate | Mapping[str, Any],
) -> Book:
    """
    Create a book owned by identity.

    Raises:
        ValidationError: If a required field is missing or blank
    """
    data = validate_payload(BookCreate, data)
    settings = get_settings()

    book = Book(
        title=data.title,
        author=data.author,
        genre=data.genre,
        year=data.year,
        description=data.description,
        image_url=data.image_url or settings.default_book_image_url,
        owner_id=identity.user_id,
        owner_name=identity.username,
    )

    with committing(db, "create book"):
        db.add(book)
    db.refresh(book)

    logger.info(f"Book {book.id} '{book.title}' created by user {identity.user_id}")
    return book


def update_book(
    db: Session,
    identity: Identity,
    book_id: int,
    data: BookUpdate | Mapping[str, Any],
) -> Book:
    """
    Apply a partial update to a book owned by identity.

    Only fields present in data (and not null) are written; ownership
    fields are never touched.

    Raises:
        ValidationError: If a provided field is invalid
        NotFoundError: If the book does not exist
        ForbiddenError: If the identity is not the owner
    """
    book = get_owned_book(db, identity, book_id, "edit")
    data = validate_payload(BookUpdate, data)

    with committing(db, "update book"):
        for field, value in data.changes().items():
            setattr(book, field, value)
    db.refresh(book)

    logger.info(f"Book {book.id} updated by user {identity.user_id}")
    return book


def delete_book(db: Session, identity: Identity, book_id: int) -> int:
    """
    Delete a book owned by identity together with its reviews.

    Reviews go first, then the book, in a single commit, so no reader
    sees reviews pointing at a deleted book.

    Returns:
        Number of reviews removed

    Raises:
        NotFoundError: If the book does not exist
        ForbiddenError: If the identity is not the owner
    """
    book = get_owned_book(db, identity, book_id, "delete")

    with committing(db, "delete book"):
        result = db.execute(delete(Review).where(Review.book_id == book.id))
        db.delete(book)

    logger.info(
        f"Book {book_id} and {result.rowcount} review(s) deleted by user {identity.user_id}"
    )
    return result.rowcount
