"""
Services Package

Business logic kept separate from HTTP handling (routers). Every
function takes the database session explicitly, and every mutation
takes the acting Identity explicitly.

Current services:
- books.py: book catalog, ownership checks, cascade delete
- reviews.py: reviews, one-per-user-per-book, author checks
- ratings.py: pure rating aggregation (average, distribution)
- profile.py: per-user profile bundle
- identity.py: the authenticated identity value
- exceptions.py: domain error taxonomy
- persistence.py: commit/rollback with error translation
- rate_limiter.py: slowapi rate limiting
- security.py: password hashing and JWT utilities
"""
