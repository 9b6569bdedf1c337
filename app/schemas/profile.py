"""
Profile Pydantic Schemas

The profile bundles everything about the current user's activity:
the books they own (with ratings and reviews), the reviews they wrote,
the reviews other users left on their books, and summary statistics.

Reviews carry a minimal reference to their book (title, and author for
reviews given) rather than the full book record.
"""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.book import BookWithRating
from app.schemas.review import ReviewResponse


class BookReference(BaseModel):
    """Minimal book info embedded in reviews the user wrote."""

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")

    model_config = ConfigDict(from_attributes=True)


class BookTitle(BaseModel):
    """Minimal book info embedded in reviews the user received."""

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")

    model_config = ConfigDict(from_attributes=True)


class OwnedBook(BookWithRating):
    """A book owned by the user with all of its reviews."""

    reviews: list[ReviewResponse] = Field(default_factory=list)


class ReviewGiven(ReviewResponse):
    book: BookReference


class ReviewReceived(ReviewResponse):
    book: BookTitle


class ProfileStats(BaseModel):
    """Counts and rating histograms for the profile page."""

    total_books: int = Field(..., ge=0)
    total_reviews_given: int = Field(..., ge=0)
    total_reviews_received: int = Field(..., ge=0)
    rating_distribution: dict[int, int] = Field(
        ...,
        description="Ratings received on the user's books, per star",
    )
    given_rating_distribution: dict[int, int] = Field(
        ...,
        description="Ratings the user gave, per star",
    )


class ProfileResponse(BaseModel):
    """Schema for GET /profile."""

    my_books: list[OwnedBook]
    reviews_given: list[ReviewGiven]
    reviews_received: list[ReviewReceived]
    stats: ProfileStats
