"""
pytest Fixtures for Book Reviews API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for engine (expensive to create)
- function scope for sessions (isolation between tests)

Every test runs inside a transaction on a single SQLite in-memory
connection; the transaction is rolled back afterwards.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Book, Review, User
from app.services.identity import Identity
from app.services.security import hash_password

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps one connection alive for the entire session.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session is wrapped in a transaction that's rolled back,
    ensuring test isolation without needing to recreate tables.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client that uses the test database session.

    The get_db dependency is overridden to hand out db_session.
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# USER FIXTURES
# =============================================================================


def make_user(db_session: Session, username: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=hash_password("SecurePass123"),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def owner(db_session: Session) -> User:
    """User who owns the sample book."""
    return make_user(db_session, "alice")


@pytest.fixture
def reviewer(db_session: Session) -> User:
    """User who reviews other people's books."""
    return make_user(db_session, "carol")


@pytest.fixture
def second_reviewer(db_session: Session) -> User:
    """Another reviewer, for multi-review scenarios."""
    return make_user(db_session, "dave")


@pytest.fixture
def owner_identity(owner: User) -> Identity:
    return Identity.from_user(owner)


@pytest.fixture
def reviewer_identity(reviewer: User) -> Identity:
    return Identity.from_user(reviewer)


@pytest.fixture
def second_reviewer_identity(second_reviewer: User) -> Identity:
    return Identity.from_user(second_reviewer)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def book_payload() -> dict:
    """Valid body for creating a book."""
    return {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "year": 1949,
        "description": "A dystopian novel set in a totalitarian society.",
    }


@pytest.fixture
def sample_book(db_session: Session, owner: User) -> Book:
    """A book owned by `owner`."""
    book = Book(
        title="1984",
        author="George Orwell",
        genre="Dystopian",
        year=1949,
        description="A dystopian novel set in a totalitarian society.",
        image_url="https://example.com/1984.jpg",
        owner_id=owner.id,
        owner_name=owner.username,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session, owner: User) -> list[Book]:
    """Create 15 books for pagination testing (more than one default page)."""
    books = []
    for i in range(15):
        book = Book(
            title=f"Test Book {i + 1}",
            author="Test Author",
            genre="Fiction",
            year=2000 + i,
            description=f"Description for book {i + 1}",
            image_url="https://example.com/cover.jpg",
            owner_id=owner.id,
            owner_name=owner.username,
        )
        db_session.add(book)
        db_session.flush()
        books.append(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, reviewer: User) -> Review:
    """A 4-star review of sample_book by `reviewer`."""
    review = Review(
        book_id=sample_book.id,
        user_id=reviewer.id,
        username=reviewer.username,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    return review
