"""Initial schema: spaces, bookings (with overlap exclusion), form drafts.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from pathlib import Path

from alembic import op


revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parents[1] / "sql" / "001_initial.sql"


def upgrade() -> None:
    sql = _SQL_FILE.read_text(encoding="utf-8")
    # Raw execution so the DO $$ ... $$ block runs as written.
    conn = op.get_bind()
    conn.exec_driver_sql(sql)


def downgrade() -> None:
    conn = op.get_bind()
    conn.exec_driver_sql(
        "DROP TABLE IF EXISTS form_drafts, bookings, spaces CASCADE;"
        " DROP TYPE IF EXISTS booking_status;"
    )
