"""Database URL helpers for Alembic migrations.

Kept apart from env.py so they can be tested without an Alembic context.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus, urlparse, urlunparse

_DRIVER_SCHEME = "postgresql+psycopg2://"


def normalize_database_url(url: str, password: str | None = None) -> str:
    """Return a SQLAlchemy URL for psycopg2.

    Accepts ``postgres://`` and ``postgresql://`` URLs. When the URL carries
    no password and ``password`` is given, it is injected.
    """
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            url = _DRIVER_SCHEME + url[len(prefix):]
            break

    if password:
        parsed = urlparse(url)
        if not parsed.password:
            netloc = f"{quote_plus(parsed.username or '')}:{quote_plus(password)}@{parsed.hostname}"
            if parsed.port:
                netloc += f":{parsed.port}"
            url = urlunparse(parsed._replace(netloc=netloc))
    return url


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    return normalize_database_url(url, os.environ.get("DB_PASSWORD"))
