"""Form drafts repository: a key-value store backed by ``form_drafts``."""

from __future__ import annotations

from elaview.infra.db import fetchone, txn


class PostgresDraftStore:
    """``KeyValueStore`` over the form_drafts table.

    Each call runs in its own short transaction.
    """

    def get(self, key: str) -> str | None:
        with txn() as cur:
            row = fetchone(cur, "SELECT payload FROM form_drafts WHERE key = %s", (key,))
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with txn() as cur:
            cur.execute(
                """
                INSERT INTO form_drafts (key, payload, updated_at)
                VALUES (%s, %s, now())
                ON CONFLICT (key) DO UPDATE
                SET payload = EXCLUDED.payload, updated_at = now()
                """,
                (key, value),
            )

    def delete(self, key: str) -> None:
        with txn() as cur:
            cur.execute("DELETE FROM form_drafts WHERE key = %s", (key,))
