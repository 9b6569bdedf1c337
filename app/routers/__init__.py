"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* (registration, login, current user)
- books.py: /api/v1/books/*
- reviews.py: /api/v1/reviews/* and /api/v1/users/{user_id}/reviews
- profile.py: /api/v1/profile/

Each router is imported and registered in main.py.
"""

from app.routers.auth import router as auth_router
from app.routers.books import router as books_router
from app.routers.profile import router as profile_router
from app.routers.reviews import router as reviews_router

__all__ = [
    "auth_router",
    "books_router",
    "profile_router",
    "reviews_router",
]
