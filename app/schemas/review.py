"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review (book_id, rating, comment)
- ReviewUpdate: Update an existing review
- ReviewResponse: Review data for API responses
- BookRatingStats: Aggregated rating statistics for a book

Business Rules:
- Rating must be 1-5 (validated at schema level)
- Comment must not be blank
- One review per user per book (enforced at database level)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReviewCreate(BaseModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "book_id": 42,
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    book_id: int = Field(..., description="ID of the book being reviewed")
    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )
    comment: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text",
        examples=["This book changed my perspective on..."],
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class ReviewUpdate(BaseModel):
    """
    Schema for updating an existing review.

    All fields are optional for partial updates; null or a blank comment
    means unchanged.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )
    comment: str | None = Field(
        default=None,
        min_length=1,
        max_length=5000,
        description="Review text",
    )

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("comment", mode="before")
    @classmethod
    def blank_comment_means_unchanged(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def changes(self) -> dict:
        """Fields explicitly provided with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ReviewResponse(BaseModel):
    """Schema for review responses."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    username: str = Field(..., description="Username of the reviewer")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: str = Field(..., description="Review text")
    created_at: datetime = Field(..., description="When the review was created")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "user_id": 7,
                "username": "booklover",
                "rating": 5,
                "comment": "A must-read classic!",
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class BookRatingStats(BaseModel):
    """
    Aggregated rating statistics for a book.

    Computed from the book's reviews on every request.
    """

    book_id: int = Field(..., description="Book ID")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no reviews)"
    )
    review_count: int = Field(
        ...,
        ge=0,
        description="Total number of reviews"
    )
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "book_id": 42,
                "average_rating": 4.2,
                "review_count": 5,
                "rating_distribution": {"1": 0, "2": 0, "3": 1, "4": 2, "5": 2},
            }
        },
    )
