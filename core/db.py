from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

import streamlit as st

from core.schema import SCHEMA_SQL


def connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return connect(db_path)


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    cols = [r["name"] for r in rows]
    return column in cols


def ensure_schema(conn: sqlite3.Connection) -> None:
    # Create base schema (for new installs)
    conn.executescript(SCHEMA_SQL)

    # ---- migrations for existing installs ----
    # Early databases had no branch partition on sales
    if not _column_exists(conn, "sales_entries", "branch_id"):
        conn.execute("ALTER TABLE sales_entries ADD COLUMN branch_id TEXT;")

    conn.commit()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    All-or-nothing block: commits on success, rolls back and re-raises on error.
    Use execute() inside it; x() commits per statement.
    """
    try:
        yield conn
        conn.commit()
    except BaseException:
        conn.rollback()
        raise


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def execute(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    last = execute(conn, sql, params)
    conn.commit()
    return last
