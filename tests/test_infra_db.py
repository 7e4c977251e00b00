"""Tests for the database layer (no real DB needed)."""

import os
from unittest.mock import MagicMock, patch

import pytest

from elaview.infra.db import fetchall, fetchone, for_update, get_conn, txn


class TestGetConn:
    def test_missing_database_url(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError, match="DATABASE_URL"):
                get_conn()

    def test_db_password_fallback_for_dsn(self):
        env = {"DATABASE_URL": "dbname=db user=u host=h", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("elaview.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with("dbname=db user=u host=h", password="from-env")

    def test_db_password_not_used_when_url_has_password(self):
        env = {"DATABASE_URL": "postgres://u:p@h/db", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("elaview.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with("postgres://u:p@h/db")

    def test_db_password_fallback_for_url(self):
        env = {"DATABASE_URL": "postgres://u@h/db", "DB_PASSWORD": "from-env"}
        with patch.dict(os.environ, env, clear=True), \
             patch("elaview.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with("postgres://u@h/db", password="from-env")


def _conn():
    conn = MagicMock()
    conn.cursor.return_value.__exit__.return_value = False
    return conn


class TestTxn:
    def test_commits_and_closes_owned_connection(self):
        conn = _conn()
        with patch("elaview.infra.db.get_conn", return_value=conn):
            with txn() as cur:
                cur.execute("SELECT 1")

        conn.commit.assert_called_once()
        conn.rollback.assert_not_called()
        conn.close.assert_called_once()

    def test_rolls_back_on_error(self):
        conn = _conn()
        with patch("elaview.infra.db.get_conn", return_value=conn):
            with pytest.raises(ValueError):
                with txn():
                    raise ValueError("boom")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        conn.close.assert_called_once()

    def test_borrowed_connection_stays_open(self):
        conn = _conn()
        with txn(conn):
            pass

        conn.commit.assert_called_once()
        conn.close.assert_not_called()


class TestQueryHelpers:
    def test_fetchone(self):
        cur = MagicMock()
        cur.fetchone.return_value = (1,)
        assert fetchone(cur, "SELECT %s", (1,)) == (1,)
        cur.execute.assert_called_once_with("SELECT %s", (1,))

    def test_fetchall(self):
        cur = MagicMock()
        cur.fetchall.return_value = [(1,), (2,)]
        assert fetchall(cur, "SELECT x FROM t") == [(1,), (2,)]

    def test_for_update_strips_semicolon(self):
        cur = MagicMock()
        for_update(cur, "SELECT id FROM spaces WHERE id = %s;", ("s",))
        assert cur.execute.call_args[0][0] == "SELECT id FROM spaces WHERE id = %s FOR UPDATE"

    def test_for_update_nowait(self):
        cur = MagicMock()
        for_update(cur, "SELECT 1", nowait=True)
        assert cur.execute.call_args[0][0].endswith("FOR UPDATE NOWAIT")
