#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample users
4. Creates books and reviews through the service layer, so ownership
   and the one-review-per-book rule apply exactly as they do over HTTP

Every seeded user has the password "SecurePass123".
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Book, Review, User
from app.services import books as book_service
from app.services import reviews as review_service
from app.services.identity import Identity
from app.services.security import hash_password

SEED_PASSWORD = "SecurePass123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, Identity]:
    """Create sample users."""
    print("Creating users...")
    users = {}
    for username in ["alice", "bob", "carol", "dave"]:
        user = User(
            email=f"{username}@example.com",
            username=username,
            hashed_password=hash_password(SEED_PASSWORD),
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        users[username] = Identity.from_user(user)

    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, users: dict[str, Identity]) -> dict[str, Book]:
    """Create sample books, each owned by one of the users."""
    print("Creating books...")
    books_data = [
        (
            "alice",
            {
                "title": "1984",
                "author": "George Orwell",
                "genre": "Dystopian",
                "year": 1949,
                "description": "A dystopian social science fiction novel "
                               "about totalitarian surveillance.",
            },
        ),
        (
            "alice",
            {
                "title": "Pride and Prejudice",
                "author": "Jane Austen",
                "genre": "Romance",
                "year": 1813,
                "description": "Elizabeth Bennet and Mr. Darcy misjudge "
                               "each other at length.",
            },
        ),
        (
            "bob",
            {
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "Science Fiction",
                "year": 1965,
                "description": "Politics, religion and ecology on the "
                               "desert planet Arrakis.",
            },
        ),
        (
            "bob",
            {
                "title": "The Hobbit",
                "author": "J.R.R. Tolkien",
                "genre": "Fantasy",
                "year": 1937,
                "description": "Bilbo Baggins is swept into a quest for "
                               "a dragon's treasure.",
            },
        ),
        (
            "carol",
            {
                "title": "Beloved",
                "author": "Toni Morrison",
                "genre": "Historical Fiction",
                "year": 1987,
                "description": "A formerly enslaved woman is haunted by "
                               "her past in post-Civil War Ohio.",
            },
        ),
    ]

    books = {}
    for owner, data in books_data:
        book = book_service.create_book(db, users[owner], data)
        books[book.title] = book

    print(f"Created {len(books)} books.")
    return books


def create_reviews(
    db: Session,
    users: dict[str, Identity],
    books: dict[str, Book],
) -> list[Review]:
    """Create sample reviews. Nobody reviews their own book."""
    print("Creating reviews...")
    reviews_data = [
        ("carol", "1984", 5, "Chilling and more relevant every year."),
        ("dave", "1984", 3, "Important, but a slog in the middle."),
        ("bob", "Pride and Prejudice", 4, "Sharper and funnier than I expected."),
        ("alice", "Dune", 5, "The world-building is unmatched."),
        ("carol", "Dune", 4, "Dense, rewarding."),
        ("dave", "Dune", 4, "Great once you get past the glossary."),
        ("dave", "The Hobbit", 5, "A perfect adventure story."),
        ("alice", "Beloved", 5, "Devastating and beautiful."),
    ]

    reviews = []
    for username, title, rating, comment in reviews_data:
        review = review_service.create_review(
            db,
            users[username],
            {"book_id": books[title].id, "rating": rating, "comment": comment},
        )
        reviews.append(review)

    print(f"Created {len(reviews)} reviews.")
    return reviews


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db, users)
        reviews = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SEED_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {len(reviews)}")
        print("\nAPI documentation at http://localhost:8000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
