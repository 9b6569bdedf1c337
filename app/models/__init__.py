"""
SQLAlchemy Models Package

This package contains all database models for the Book Reviews API.

Model Relationships:
- User -> Book: One-to-Many via books.owner_id
- User -> Review: One-to-Many via reviews.user_id
- Book -> Review: One-to-Many via reviews.book_id (application-enforced)

Import all models here to:
1. Make them available as: from app.models import Book, Review, User
2. Ensure Alembic discovers them for migrations
"""

from app.models.user import User
from app.models.book import Book
from app.models.review import Review

__all__ = [
    "User",
    "Book",
    "Review",
]
