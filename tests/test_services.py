"""
Service Layer Tests

The services are called directly here, with an Identity instead of a
bearer token, to pin down the rules the HTTP tests only see through
status codes:
- Ownership checks on books and reviews
- One review per user per book
- Deleting a book deletes its reviews in the same commit
- Database failures become StorageError / ConflictError
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.models import Book, Review
from app.schemas.review import ReviewCreate
from app.services import books as book_service
from app.services import reviews as review_service
from app.services.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)
from app.services.identity import Identity
from app.services.persistence import committing
from app.services.profile import build_profile
from app.services.security import create_access_token
from app.utils.pagination import PageRequest
from app.utils.validation import validate_payload

# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class,status_code",
        [
            (ValidationError, 422),
            (NotFoundError, 404),
            (ForbiddenError, 403),
            (ConflictError, 409),
            (StorageError, 500),
        ],
    )
    def test_status_codes(self, exc_class, status_code):
        exc = exc_class("boom")

        assert isinstance(exc, ServiceError)
        assert exc.status_code == status_code
        assert exc.message == "boom"


# =============================================================================
# Validation
# =============================================================================


class TestValidatePayload:
    def test_schema_instance_passes_through(self):
        data = ReviewCreate(book_id=1, rating=3, comment="Fine")

        assert validate_payload(ReviewCreate, data) is data

    def test_mapping_is_validated(self):
        data = validate_payload(ReviewCreate, {"book_id": 1, "rating": 3, "comment": " Fine "})

        assert data.comment == "Fine"

    def test_invalid_mapping_raises_domain_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(ReviewCreate, {"book_id": 1, "rating": 9, "comment": "x"})

        assert "rating" in exc_info.value.message


# =============================================================================
# Books
# =============================================================================


class TestBookService:
    def test_create_book_from_mapping(
        self, db_session: Session, owner_identity: Identity
    ):
        book = book_service.create_book(
            db_session,
            owner_identity,
            {
                "title": "Brave New World",
                "author": "Aldous Huxley",
                "genre": "Dystopian",
                "year": 1932,
                "description": "Soma for everyone.",
            },
        )

        assert book.id is not None
        assert book.owner_id == owner_identity.user_id
        assert book.owner_name == owner_identity.username

    def test_create_book_missing_title(
        self, db_session: Session, owner_identity: Identity
    ):
        with pytest.raises(ValidationError):
            book_service.create_book(
                db_session,
                owner_identity,
                {"author": "A", "genre": "G", "year": 2000, "description": "D"},
            )

    def test_get_book_not_found(self, db_session: Session):
        with pytest.raises(NotFoundError):
            book_service.get_book(db_session, 424242)

    def test_update_book_forbidden_for_non_owner(
        self,
        db_session: Session,
        sample_book: Book,
        reviewer_identity: Identity,
    ):
        with pytest.raises(ForbiddenError):
            book_service.update_book(
                db_session, reviewer_identity, sample_book.id, {"title": "Mine now"}
            )

        assert db_session.get(Book, sample_book.id).title == "1984"

    def test_update_book_ownership_checked_before_validation(
        self,
        db_session: Session,
        sample_book: Book,
        reviewer_identity: Identity,
    ):
        """A non-owner sending an invalid body still gets Forbidden."""
        with pytest.raises(ForbiddenError):
            book_service.update_book(
                db_session, reviewer_identity, sample_book.id, {"year": -5}
            )

    def test_update_book_blank_fields_ignored(
        self, db_session: Session, sample_book: Book, owner_identity: Identity
    ):
        book = book_service.update_book(
            db_session,
            owner_identity,
            sample_book.id,
            {"title": "", "author": "   ", "year": 0},
        )

        assert book.title == "1984"
        assert book.author == "George Orwell"
        assert book.year == 0

    def test_get_book_id_too_large(self, db_session: Session):
        with pytest.raises(NotFoundError):
            book_service.get_book(db_session, 2**64)

    def test_update_book_cannot_change_owner(
        self,
        db_session: Session,
        sample_book: Book,
        owner_identity: Identity,
        reviewer_identity: Identity,
    ):
        book = book_service.update_book(
            db_session,
            owner_identity,
            sample_book.id,
            {"owner_id": reviewer_identity.user_id, "genre": "Classic"},
        )

        assert book.owner_id == owner_identity.user_id
        assert book.genre == "Classic"

    def test_delete_book_cascades_reviews(
        self,
        db_session: Session,
        sample_book: Book,
        sample_review: Review,
        owner_identity: Identity,
    ):
        book_id = sample_book.id

        removed = book_service.delete_book(db_session, owner_identity, book_id)

        assert removed == 1
        count = db_session.execute(
            select(func.count()).select_from(Review).where(Review.book_id == book_id)
        ).scalar_one()
        assert count == 0
        with pytest.raises(NotFoundError):
            book_service.get_book(db_session, book_id)

    def test_delete_book_forbidden_keeps_reviews(
        self,
        db_session: Session,
        sample_book: Book,
        sample_review: Review,
        reviewer_identity: Identity,
    ):
        with pytest.raises(ForbiddenError):
            book_service.delete_book(db_session, reviewer_identity, sample_book.id)

        assert review_service.list_reviews_for_book(db_session, sample_book.id) != []

    def test_list_books_page_fields(self, db_session: Session, multiple_books: list[Book]):
        result = book_service.list_books(db_session, PageRequest(page=2, limit=10))

        assert result["total"] == 15
        assert result["current_page"] == 2
        assert result["total_pages"] == 2
        assert result["limit"] == 10
        assert len(result["items"]) == 5

    def test_get_book_detail(
        self, db_session: Session, sample_book: Book, sample_review: Review
    ):
        detail = book_service.get_book_detail(db_session, sample_book.id)

        assert detail["average_rating"] == 4.0
        assert detail["review_count"] == 1
        assert detail["reviews"][0].id == sample_review.id


# =============================================================================
# Reviews
# =============================================================================


class TestReviewService:
    def test_create_review(
        self, db_session: Session, sample_book: Book, reviewer_identity: Identity
    ):
        review = review_service.create_review(
            db_session,
            reviewer_identity,
            {"book_id": sample_book.id, "rating": 5, "comment": "Great"},
        )

        assert review.user_id == reviewer_identity.user_id
        assert review.username == reviewer_identity.username

    def test_create_review_conflict(
        self,
        db_session: Session,
        sample_book: Book,
        sample_review: Review,
        reviewer_identity: Identity,
    ):
        with pytest.raises(ConflictError):
            review_service.create_review(
                db_session,
                reviewer_identity,
                {"book_id": sample_book.id, "rating": 2, "comment": "Again"},
            )

        assert len(review_service.list_reviews_for_book(db_session, sample_book.id)) == 1

    @pytest.mark.parametrize("rating", [0, 6])
    def test_create_review_rating_bounds(
        self,
        db_session: Session,
        sample_book: Book,
        reviewer_identity: Identity,
        rating: int,
    ):
        with pytest.raises(ValidationError):
            review_service.create_review(
                db_session,
                reviewer_identity,
                {"book_id": sample_book.id, "rating": rating, "comment": "Edge"},
            )

    @pytest.mark.parametrize("rating", [1, 5])
    def test_create_review_rating_edges_accepted(
        self,
        db_session: Session,
        sample_book: Book,
        reviewer_identity: Identity,
        rating: int,
    ):
        review = review_service.create_review(
            db_session,
            reviewer_identity,
            {"book_id": sample_book.id, "rating": rating, "comment": "Edge"},
        )

        assert review.rating == rating

    def test_create_review_blank_comment(
        self, db_session: Session, sample_book: Book, reviewer_identity: Identity
    ):
        with pytest.raises(ValidationError):
            review_service.create_review(
                db_session,
                reviewer_identity,
                {"book_id": sample_book.id, "rating": 3, "comment": "   "},
            )

    def test_create_review_missing_book(
        self, db_session: Session, reviewer_identity: Identity
    ):
        with pytest.raises(NotFoundError):
            review_service.create_review(
                db_session,
                reviewer_identity,
                {"book_id": 424242, "rating": 3, "comment": "Ghost"},
            )

    def test_update_review_forbidden(
        self,
        db_session: Session,
        sample_review: Review,
        second_reviewer_identity: Identity,
    ):
        with pytest.raises(ForbiddenError):
            review_service.update_review(
                db_session, second_reviewer_identity, sample_review.id, {"rating": 1}
            )

    def test_update_review_blank_comment_ignored(
        self, db_session: Session, sample_review: Review, reviewer_identity: Identity
    ):
        review = review_service.update_review(
            db_session, reviewer_identity, sample_review.id, {"comment": "   "}
        )

        assert review.comment == "I really enjoyed reading this book."

    def test_delete_review_not_found(
        self, db_session: Session, reviewer_identity: Identity
    ):
        with pytest.raises(NotFoundError):
            review_service.delete_review(db_session, reviewer_identity, 424242)

    def test_list_reviews_oldest_first(
        self,
        db_session: Session,
        sample_book: Book,
        sample_review: Review,
        second_reviewer_identity: Identity,
    ):
        newer = review_service.create_review(
            db_session,
            second_reviewer_identity,
            {"book_id": sample_book.id, "rating": 2, "comment": "Meh"},
        )

        oldest_first = review_service.list_reviews_for_book(
            db_session, sample_book.id, newest_first=False
        )

        assert [r.id for r in oldest_first] == [sample_review.id, newer.id]


# =============================================================================
# Profile
# =============================================================================


class TestBuildProfile:
    def test_distribution_sums_to_received(
        self,
        db_session: Session,
        sample_book: Book,
        sample_review: Review,
        owner_identity: Identity,
    ):
        profile = build_profile(db_session, owner_identity)

        stats = profile["stats"]
        assert sum(stats["rating_distribution"].values()) == stats["total_reviews_received"]
        assert stats["rating_distribution"][4] == 1


# =============================================================================
# Commit handling
# =============================================================================


class TestCommitting:
    """committing() is exercised with a mock session so rollback stays local."""

    def test_commits_on_success(self):
        db = MagicMock()

        with committing(db, "do something"):
            pass

        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_integrity_error_becomes_conflict(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

        with pytest.raises(ConflictError) as exc_info:
            with committing(db, "create review", conflict_message="Already there"):
                pass

        assert exc_info.value.message == "Already there"
        db.rollback.assert_called_once()

    def test_integrity_error_without_conflict_message(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("NOT NULL"))

        with pytest.raises(StorageError):
            with committing(db, "create book"):
                pass

    def test_database_error_becomes_storage_error(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk full"))

        with pytest.raises(StorageError) as exc_info:
            with committing(db, "delete book"):
                pass

        assert exc_info.value.message == "Could not delete book"
        db.rollback.assert_called_once()

    def test_storage_error_over_http(self, client, owner, monkeypatch):
        """A failed commit is reported as 500 with the short message."""

        def failing_create_book(*args, **kwargs):
            raise StorageError("Could not create book")

        monkeypatch.setattr(book_service, "create_book", failing_create_book)

        response = client.post(
            "/api/v1/books/",
            json={
                "title": "T",
                "author": "A",
                "genre": "G",
                "year": 2000,
                "description": "D",
            },
            headers={"Authorization": f"Bearer {create_access_token({'sub': str(owner.id)})}"},
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Could not create book"}
