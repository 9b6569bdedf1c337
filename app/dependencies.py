"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: per-request database session
- Pagination: lenient page/limit query parameters
- CurrentUser / CurrentIdentity: JWT bearer authentication

Routes that mutate books or reviews depend on CurrentIdentity, so a
request without a valid token is rejected with 401 before any service
code runs.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models import User
from app.services.identity import Identity
from app.services.security import decode_access_token
from app.utils.pagination import PageRequest, fits_sql_integer, parse_page_params

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_books(db: Session = Depends(get_db)):
#
# You can write:
#   def get_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
def get_page_request(
    page: str | None = Query(
        default=None,
        description="Page number (1-indexed). Invalid values fall back to 1.",
        examples=["1", "2"],
    ),
    limit: str | None = Query(
        default=None,
        description=(
            "Items per page. Invalid values fall back to the default (12); "
            "values above the maximum (100) are capped."
        ),
        examples=["12", "24"],
    ),
) -> PageRequest:
    """
    Common pagination parameters for list endpoints.

    Parameters are taken as raw strings so that ?page=abc or ?limit=0
    fall back to the defaults instead of failing with 422:
        GET /books/?page=2&limit=12
    """
    return parse_page_params(
        page,
        limit,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )


Pagination = Annotated[PageRequest, Depends(get_page_request)]


# =============================================================================
# JWT Authentication
# =============================================================================
# OAuth2PasswordBearer extracts the token from "Authorization: Bearer <token>",
# returns 401 if the header is missing and adds the "Authorize" button to
# Swagger UI.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/auth/login",
    auto_error=True,
)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Extract and validate the current user from the JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown
        HTTPException: 403 if the account is inactive
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise credentials_exception
    if not fits_sql_integer(int(user_id)):
        raise credentials_exception

    user = db.get(User, int(user_id))
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    return user


def get_current_identity(
    current_user: User = Depends(get_current_user),
) -> Identity:
    """The authenticated identity that services check ownership against."""
    return Identity.from_user(current_user)


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
