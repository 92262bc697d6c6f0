# Overview: Write-transaction helpers; every read-modify-write runs through these.

from __future__ import annotations

import logging
import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..validation import StoreError


logger = logging.getLogger(__name__)

DEFAULT_RETRY_ON = (OperationalError, StaleDataError)


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; begin_exclusive() covers it.
    """
    return query.with_for_update()


def begin_exclusive() -> None:
    """
    Take the database write lock before the first read of a
    read-modify-write sequence.

    On SQLite this is BEGIN IMMEDIATE, which serializes writers for the
    whole transaction, so two upserts for one supervisor cannot interleave
    their read and write phases. Must be the first statement of the
    transaction.
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1, retry_on=DEFAULT_RETRY_ON):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (locks) and StaleDataError by default;
    callers add IntegrityError when a unique-constraint race means
    "someone else inserted first, re-read and try again".

    The session is rolled back on every failure. Store failures that
    survive the retries surface as StoreError; domain errors propagate
    unchanged.
    """
    for attempt in range(attempts):
        try:
            return func()
        except retry_on as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise StoreError("Record store unavailable") from exc
            logger.warning("Retrying write after %s (attempt %d)", type(exc).__name__, attempt + 1)
            time.sleep(backoff_base * (2 ** attempt))
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StoreError("Record store error") from exc
        except Exception:
            db.session.rollback()
            raise
    raise StoreError("Record store unavailable")
