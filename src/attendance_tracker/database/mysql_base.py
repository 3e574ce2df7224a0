from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import SessionConflictError, StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, deadlock_is_conflict: bool = False):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits on success, rolls back on error. Integrity violations become
    ``SessionConflictError``. A deadlock does too when ``deadlock_is_conflict``
    is set (inserts racing for the same partition); otherwise it is treated
    like any other driver error and becomes ``StoreUnavailableError``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("database connection failed: %s", exc)
        raise StoreUnavailableError() from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            _close_quietly(cur)
    except mysql.connector.IntegrityError as exc:
        _safe_rollback(conn)
        raise SessionConflictError(str(exc)) from exc
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        if deadlock_is_conflict and getattr(exc, "errno", None) == errorcode.ER_LOCK_DEADLOCK:
            raise SessionConflictError(str(exc)) from exc
        logger.error("database operation failed: %s", exc)
        raise StoreUnavailableError() from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _close_quietly(cur) -> None:
    # An abandoned streaming cursor may still hold unread rows.
    try:
        cur.close()
    except mysql.connector.Error:
        logger.debug("cursor closed with unread rows")


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("rollback failed on a broken connection")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def iter_rows(cur, *, batch_size: int) -> Iterator[Dict[str, Any]]:
    """Yield rows from an executed cursor in batches of ``batch_size``."""
    while True:
        batch = cur.fetchmany(int(batch_size))
        if not batch:
            return
        for row in batch:
            yield row
