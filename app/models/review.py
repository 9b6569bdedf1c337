"""
Review Model

Represents a user's review of a book: a 1-5 star rating and a comment.

Business Rules:
- One review per user per book (unique constraint)
- Rating must be 1-5 (check constraint)
- Only the author can edit/delete a review
- Reviews are removed when their book is deleted (done by the book service)

book_id has no foreign key: the book/review relationship is maintained by
the application. Readers must tolerate a review whose book is gone.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Review(Base):
    """
    Review model for book reviews.

    Attributes:
        id: Primary key
        book_id: Id of the reviewed book (no foreign key)
        user_id: Foreign key to users table
        username: Author's username at review time
        rating: 1-5 star rating
        comment: Review text
        created_at: When the review was created
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    book_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Reviewed book id, integrity kept by the application",
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Author's username",
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )
    comment: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Review text content",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        # One review per user per book
        UniqueConstraint("book_id", "user_id", name="uq_review_book_user"),
        # Rating must be 1-5
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"
