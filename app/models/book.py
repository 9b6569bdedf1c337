"""
Book Model

The central model of the Book Reviews API.

Ownership:
==========
A book belongs to the user who created it. owner_id and owner_name are
copied from the authenticated identity at creation and are never written
again; only the owner may update or delete the book.

Reviews are NOT mapped as an ORM relationship with cascade. Deleting a
book removes its reviews explicitly in app.services.books.delete_book.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Book(Base):
    """
    Book model representing a catalogued book.

    Table: books

    Fields:
    - title, author, genre: required, trimmed, non-empty
    - year: publication year
    - description: required, non-empty
    - image_url: cover image (placeholder when not provided)
    - owner_id / owner_name: the creating user, immutable

    Indexes:
    - owner_id: profile lookups ("my books")
    - created_at: newest-first listing

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            genre="Dystopian",
            year=1949,
            description="A dystopian novel...",
            owner_id=user.id,
            owner_name=user.username,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Catalog Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Author name as entered by the owner"
    )

    genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre as entered by the owner"
    )

    year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Publication year"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    image_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Cover image URL"
    )

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        index=True,
        nullable=False,
        comment="User who created the book"
    )

    owner_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Username of the creating user"
    )

    # Application-side default so rows created in the same second still
    # order deterministically by (created_at, id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', owner_id={self.owner_id})"
