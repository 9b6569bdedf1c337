"""
Book Pydantic Schemas

Schemas:
- BookCreate: Fields required when creating a book
- BookUpdate: Partial update, every field optional
- BookResponse: Stored book fields
- BookWithRating: Book enriched with average rating and review count
- BookDetailResponse: Book with rating and its reviews (newest first)
- BookListResponse: One page of enriched books

Text fields are stripped of surrounding whitespace before the length
checks run, so "   " is rejected as empty.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.review import ReviewResponse


class BookBase(BaseModel):
    """Catalog fields shared by create and response schemas."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )
    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )
    genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre",
        examples=["Dystopian", "Romance"],
    )
    year: int = Field(
        ...,
        ge=0,
        le=9999,
        description="Publication year",
        examples=[1949],
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Book description or summary",
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    title, author, genre, year and description are required.
    image_url falls back to the configured placeholder cover.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "year": 1949,
        "description": "A dystopian social science fiction novel."
    }
    """

    image_url: str | None = Field(
        default=None,
        max_length=2000,
        description="Cover image URL",
    )

    @field_validator("image_url")
    @classmethod
    def blank_image_url_means_default(cls, v: str | None) -> str | None:
        return v or None


class BookUpdate(BaseModel):
    """
    Schema for updating an existing book.

    Only fields present in the request body are applied. A field sent
    as null or as a blank string is treated as absent: updates never
    clear a value.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    genre: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=0, le=9999)
    description: str | None = Field(default=None, min_length=1)
    image_url: str | None = Field(default=None, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("title", "author", "genre", "description", "image_url", mode="before")
    @classmethod
    def blank_means_unchanged(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def changes(self) -> dict:
        """Fields explicitly provided with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class BookResponse(BookBase):
    """Schema for book responses."""

    id: int = Field(..., description="Unique book identifier")
    image_url: str = Field(..., description="Cover image URL")
    owner_id: int = Field(..., description="ID of the user who added the book")
    owner_name: str = Field(..., description="Username of the user who added the book")
    created_at: datetime = Field(..., description="When the book was added")

    model_config = ConfigDict(from_attributes=True)


class BookWithRating(BookResponse):
    """Book plus aggregates computed from its reviews at read time."""

    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Mean rating rounded to one decimal (0 when unreviewed)",
    )
    review_count: int = Field(..., ge=0, description="Number of reviews")


class BookDetailResponse(BookWithRating):
    """Single book with its reviews, newest first."""

    reviews: list[ReviewResponse] = Field(default_factory=list)


class BookListResponse(BaseModel):
    """
    Schema for paginated book list responses.

    - total: Total number of books
    - current_page: Page returned
    - total_pages: ceil(total / limit)
    - limit: Page size actually applied
    """

    items: list[BookWithRating] = Field(..., description="Books on this page, newest first")
    total: int = Field(..., ge=0, description="Total number of books")
    current_page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    limit: int = Field(..., ge=1, description="Number of items per page")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "total": 30,
                "current_page": 1,
                "total_pages": 3,
                "limit": 12,
            }
        },
    )
