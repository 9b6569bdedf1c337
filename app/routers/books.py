"""
Books Router

CRUD endpoints for books plus read-only rating views.

Endpoints:
- GET /books/ - Paginated list, newest first, with average rating
- GET /books/{book_id} - Book detail with average rating and reviews
- GET /books/{book_id}/rating - Rating statistics
- GET /books/{book_id}/reviews - Reviews of a book, newest first
- POST /books/ - Create a book (authenticated)
- PUT /books/{book_id} - Update a book (owner only)
- DELETE /books/{book_id} - Delete a book and its reviews (owner only)

Business logic lives in app.services.books; errors raised there are
converted to HTTP responses by the ServiceError handler in app.main.
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import CurrentIdentity, DbSession, Pagination
from app.schemas import (
    BookCreate,
    BookDetailResponse,
    BookListResponse,
    BookRatingStats,
    BookResponse,
    BookUpdate,
    ReviewResponse,
)
from app.services import books as book_service
from app.services import reviews as review_service
from app.services.rate_limiter import limiter
from app.services.ratings import rating_stats

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Read Endpoints
# =============================================================================


@router.get(
    "/",
    response_model=BookListResponse,
    summary="List all books",
    description="Get a paginated list of books, newest first, with rating aggregates.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> BookListResponse:
    """
    List books with offset pagination.

    Query parameters page and limit default to 1 and 12. Invalid values
    fall back to the defaults rather than failing.
    """
    return BookListResponse.model_validate(book_service.list_books(db, pagination))


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    summary="Get a book by ID",
    description="Retrieve a book with its average rating and all of its reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookDetailResponse:
    """
    Get a single book by its ID.

    Raises:
        NotFoundError: 404 if book not found
    """
    return BookDetailResponse.model_validate(book_service.get_book_detail(db, book_id))


@router.get(
    "/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Average rating, review count and per-star distribution for a book.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_rating_stats(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookRatingStats:
    book = book_service.get_book(db, book_id)
    stats = rating_stats(review_service.list_reviews_for_book(db, book.id))

    return BookRatingStats(
        book_id=book.id,
        average_rating=stats.average_rating,
        review_count=stats.review_count,
        rating_distribution=stats.rating_distribution,
    )


@router.get(
    "/{book_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews for a book",
    description="All reviews of a book, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
) -> list[ReviewResponse]:
    book = book_service.get_book(db, book_id)
    reviews = review_service.list_reviews_for_book(db, book.id)
    return [ReviewResponse.model_validate(review) for review in reviews]


# =============================================================================
# Write Endpoints
# =============================================================================


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Add a book to the catalog. The authenticated user becomes its owner.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    identity: CurrentIdentity,
) -> BookResponse:
    """
    Create a new book.

    Args:
        book_data: Validated book data from request body
        identity: Authenticated user, recorded as owner

    Returns:
        Created book
    """
    book = book_service.create_book(db, identity, book_data)
    return BookResponse.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Partially update a book. Only the owner can update it.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    identity: CurrentIdentity,
) -> BookResponse:
    """
    Update an existing book.

    Fields left out of the body (or sent as null) keep their value.

    Raises:
        NotFoundError: 404 if book not found
        ForbiddenError: 403 if the user is not the owner
    """
    book = book_service.update_book(db, identity, book_id, book_data)
    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Delete a book and all of its reviews. Only the owner can delete it.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    identity: CurrentIdentity,
) -> None:
    """
    Delete a book.

    Raises:
        NotFoundError: 404 if book not found
        ForbiddenError: 403 if the user is not the owner
    """
    book_service.delete_book(db, identity, book_id)
