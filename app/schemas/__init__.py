"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from app.schemas.book import (
    BookCreate,
    BookDetailResponse,
    BookListResponse,
    BookResponse,
    BookUpdate,
    BookWithRating,
)
from app.schemas.profile import ProfileResponse, ProfileStats
from app.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.user import TokenResponse, UserCreate, UserResponse

__all__ = [
    # Book schemas
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookWithRating",
    "BookDetailResponse",
    "BookListResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "BookRatingStats",
    # Profile schemas
    "ProfileResponse",
    "ProfileStats",
    # User schemas
    "UserCreate",
    "UserResponse",
    "TokenResponse",
]
