"""
Commit helpers shared by the book and review services.

Every mutation ends in exactly one commit. Database failures are rolled
back and re-raised as StorageError (or ConflictError for a violated
unique constraint) so callers see a domain error, never a driver one.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def committing(
    db: Session,
    action: str,
    conflict_message: str | None = None,
) -> Iterator[Session]:
    """
    Run the block and commit it as one unit.

    Args:
        db: Database session
        action: Short description used in logs and the error message
        conflict_message: If given, an IntegrityError becomes a
            ConflictError with this message

    Raises:
        ConflictError: Unique constraint violated and conflict_message set
        StorageError: Any other database failure
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is not None:
            logger.warning(f"Integrity conflict while trying to {action}: {exc.orig}")
            raise ConflictError(conflict_message) from exc
        logger.error(f"Integrity error while trying to {action}: {exc}")
        raise StorageError(f"Could not {action}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Database error while trying to {action}: {exc}")
        raise StorageError(f"Could not {action}") from exc
