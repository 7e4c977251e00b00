"""Database access layer using psycopg2.

Raw SQL, no ORM. Repositories receive a cursor opened by ``txn()`` so that
a whole booking flow (lock, re-check, insert) shares one transaction.
"""

import os
from contextlib import contextmanager
from typing import Any, Iterator, Sequence
from urllib.parse import urlparse

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor


def _has_password(dsn: str) -> bool:
    if "://" in dsn:
        return urlparse(dsn).password is not None
    return "password=" in dsn


def get_conn() -> PgConnection:
    """Open a new connection from DATABASE_URL.

    DB_PASSWORD is passed separately when the DSN/URL carries no password.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: On connection failure.
    """
    dsn = os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")
    password = os.environ.get("DB_PASSWORD")
    if password and not _has_password(dsn):
        return psycopg2.connect(dsn, password=password)
    return psycopg2.connect(dsn)


@contextmanager
def txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """Context manager for a short transaction.

    Commits on successful exit, rolls back on exception. When ``conn`` is
    None a connection is opened and closed around the block.

    Example:
        with txn() as cur:
            cur.execute("SELECT 1")
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row (None when empty)."""
    cur.execute(query, params)
    return cur.fetchone()


def fetchall(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> list[tuple[Any, ...]]:
    """Execute query and fetch all rows."""
    cur.execute(query, params)
    return cur.fetchall()


def for_update(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
    *,
    nowait: bool = False,
) -> tuple[Any, ...] | None:
    """Run ``query`` with FOR UPDATE appended and fetch one row.

    Use inside ``txn()``; the row stays locked until commit/rollback.
    With ``nowait`` the statement fails instead of waiting on a held lock.
    """
    suffix = " FOR UPDATE NOWAIT" if nowait else " FOR UPDATE"
    full_query = query.rstrip().rstrip(";") + suffix
    cur.execute(full_query, params)
    return cur.fetchone()
