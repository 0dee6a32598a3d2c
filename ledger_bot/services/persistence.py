"""Commit/rollback boundary shared by the write paths"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_bot.domain.exceptions import PersistenceError
from ledger_bot.infrastructure.observability.metrics import internal_error_counter


@contextmanager
def committing(db: Session, operation: str, user_message: str) -> Iterator[Session]:
    """
    Commit everything staged inside the block as one unit.

    On any database error the session is rolled back, the failure is logged
    and counted, and PersistenceError(user_message) is raised instead.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        internal_error_counter.labels(operation=operation).inc()
        logging.error(f"Persistence failure in {operation}: {e}", exc_info=True, extra={"operation": operation})
        raise PersistenceError(user_message) from e
