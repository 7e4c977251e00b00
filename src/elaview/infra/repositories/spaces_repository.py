"""Advertising spaces repository (read side used by bookings)."""

from __future__ import annotations

from decimal import Decimal

from psycopg2.extensions import cursor as PgCursor

from elaview.domain.models import Space
from elaview.infra.db import fetchone, for_update


def _row_to_space(row: tuple) -> Space:
    return Space(
        id=str(row[0]),
        title=row[1],
        daily_rate=Decimal(row[2]) if row[2] is not None else None,
        prohibited_content=tuple(row[3] or ()),
    )


_SELECT_SPACE = """
    SELECT id, title, daily_rate, prohibited_content
    FROM spaces
    WHERE id = %s
"""


def get_space(cur: PgCursor, space_id: str, *, lock: bool = False) -> Space | None:
    """Load a space; with ``lock`` the row is held until the transaction ends.

    Locking the space serialises concurrent booking attempts on it.
    """
    if lock:
        row = for_update(cur, _SELECT_SPACE, (space_id,))
    else:
        row = fetchone(cur, _SELECT_SPACE, (space_id,))
    if row is None:
        return None
    return _row_to_space(row)
