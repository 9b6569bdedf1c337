"""
Test Suite for Book Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, users, sample data)
- test_books.py: /api/v1/books endpoints
- test_reviews.py: /api/v1/reviews and /api/v1/users/{id}/reviews endpoints
- test_profile.py: /api/v1/profile endpoint
- test_user_auth.py: registration, login and token handling
- test_services.py: service-layer rules called directly
- test_ratings.py: rating aggregation
- test_pagination.py: page/limit parsing and SQL integer bounds
- test_migrations.py: offline render of the Alembic migration

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
