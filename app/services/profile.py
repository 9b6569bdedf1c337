"""
Profile Service

Builds the current user's profile from books, reviews and the rating
aggregations. Read-only: nothing here writes to the database.

Steps:
1. Books owned by the user, newest first
2. Each book enriched with average rating, review count and its reviews
3. Reviews the user wrote, each with its book's title and author
4. Reviews other users left on the owned books, each with the book title
5. Counts plus rating distributions for received and given reviews

Reviews whose book no longer exists are left out of steps 3 and 4.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Book, Review
from app.schemas.profile import BookReference, BookTitle
from app.schemas.review import ReviewResponse
from app.services.identity import Identity
from app.services.ratings import enrich_book, rating_distribution

logger = logging.getLogger(__name__)


def owned_books(db: Session, identity: Identity) -> list[Book]:
    stmt = (
        select(Book)
        .where(Book.owner_id == identity.user_id)
        .order_by(Book.created_at.desc(), Book.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def reviews_given(db: Session, identity: Identity) -> list[tuple[Review, str, str]]:
    """Reviews written by identity joined to their book's title and author."""
    stmt = (
        select(Review, Book.title, Book.author)
        .join(Book, Book.id == Review.book_id)
        .where(Review.user_id == identity.user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return [tuple(row) for row in db.execute(stmt).all()]


def reviews_received(db: Session, books: list[Book]) -> list[Review]:
    """Reviews on any of the given books, newest first."""
    if not books:
        return []
    stmt = (
        select(Review)
        .where(Review.book_id.in_([book.id for book in books]))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def _review_dict(review: Review, **extra: Any) -> dict[str, Any]:
    data = ReviewResponse.model_validate(review).model_dump()
    data.update(extra)
    return data


def build_profile(db: Session, identity: Identity) -> dict[str, Any]:
    """
    Assemble the profile bundle for identity.

    Returns:
        Dict matching ProfileResponse
    """
    books = owned_books(db, identity)
    titles = {book.id: book.title for book in books}

    received = reviews_received(db, books)
    received_by_book: dict[int, list[Review]] = {book.id: [] for book in books}
    for review in received:
        received_by_book[review.book_id].append(review)

    my_books = []
    for book in books:
        book_reviews = received_by_book[book.id]
        entry = enrich_book(book, book_reviews)
        entry["reviews"] = [ReviewResponse.model_validate(r) for r in book_reviews]
        my_books.append(entry)

    given = reviews_given(db, identity)
    given_reviews = [review for review, _, _ in given]

    logger.debug(
        f"Profile for user {identity.user_id}: {len(books)} books, "
        f"{len(given)} reviews given, {len(received)} received"
    )

    return {
        "my_books": my_books,
        "reviews_given": [
            _review_dict(
                review,
                book=BookReference(id=review.book_id, title=title, author=author),
            )
            for review, title, author in given
        ],
        "reviews_received": [
            _review_dict(
                review,
                book=BookTitle(id=review.book_id, title=titles[review.book_id]),
            )
            for review in received
        ],
        "stats": {
            "total_books": len(books),
            "total_reviews_given": len(given),
            "total_reviews_received": len(received),
            "rating_distribution": rating_distribution(received),
            "given_rating_distribution": rating_distribution(given_reviews),
        },
    }
