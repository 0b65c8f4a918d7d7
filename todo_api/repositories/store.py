"""Translation of SQLAlchemy failures into application errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from todo_api.errors import ConflictError, InternalError

logger = logging.getLogger("todo_api")


@contextmanager
def store_errors(db: Session, conflict: str | None = None) -> Iterator[None]:
    """Roll back and re-raise store failures as ConflictError or InternalError.

    ``conflict`` is the client-facing message used when a uniqueness constraint
    rejects the write; without it an integrity failure is an internal error.
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if conflict:
            raise ConflictError(conflict) from exc
        logger.exception("Integrity error in store")
        raise InternalError("Integrity error") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store operation failed")
        raise InternalError("Store operation failed") from exc
