"""Read-only access layer for the results archive.

Provides ArchiveReader for querying the local SQLite archive containing
competition results, schedules and reference tables. All methods are read-only:
the audit never writes back to the archive.

Key Methods:
    query() - Execute raw SQL and return list of dicts
    get_results() - Results in the audit window (target year or later)
    get_history() - Results dated strictly before the target year
    get_schedule_activities() / get_venues() - Schedule data for round dates
    get_round_types() / get_countries() / get_events() - Reference tables

Usage:
    from recordaudit.data import ArchiveReader

    reader = ArchiveReader()
    results = reader.get_results(year=2024)
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pandas as pd

from recordaudit.config import DEFAULT_DB_PATH
from recordaudit.data import queries as Q


def _dict_factory(cursor, row):
    mapping = {}
    for idx, col in enumerate(cursor.description):
        mapping[col[0]] = row[idx]
    return mapping


class ArchiveReader:
    """Lightweight SQLite client for archive access."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = str(db_path or DEFAULT_DB_PATH)
        if not os.path.exists(self.db_path):
            raise FileNotFoundError(f"Database not found: {self.db_path}")

    @contextmanager
    def _conn(self):
        # Read-only URI so an audit can never modify the archive
        conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        try:
            yield conn
        finally:
            conn.close()

    def query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Execute raw SQL and return list of dicts."""
        with self._conn() as conn:
            conn.row_factory = _dict_factory
            cur = conn.execute(sql, params)
            return cur.fetchall()

    def frame(self, sql: str, params: tuple = ()) -> pd.DataFrame:
        """Execute raw SQL and return a DataFrame (columns kept when empty)."""
        with self._conn() as conn:
            return pd.read_sql_query(sql, conn, params=params)

    # -------------------------------------------------------------------------
    # Result queries
    # -------------------------------------------------------------------------

    def get_results(self, year: int, end_year: Optional[int] = None) -> pd.DataFrame:
        """Get results of competitions held in [year, end_year].

        The year is the last four characters of the competition id, so
        competitions without a start date are included.

        Stored labels are returned as "" when NULL; missing best/average as 0.
        """
        if end_year is None:
            return self.frame(Q.RESULTS_FROM_YEAR, (year,))
        return self.frame(Q.RESULTS_YEAR_RANGE, (year, end_year))

    def get_history(self, year: int) -> pd.DataFrame:
        """Get results of competitions held strictly before year."""
        return self.frame(Q.RESULTS_BEFORE_YEAR, (year,))

    # -------------------------------------------------------------------------
    # Competition / schedule queries
    # -------------------------------------------------------------------------

    def get_competitions(self) -> pd.DataFrame:
        return self.frame(Q.COMPETITIONS_ALL)

    def get_venues(self) -> pd.DataFrame:
        """Get venue rooms with their competition and timezone."""
        return self.frame(Q.VENUES_ALL)

    def get_schedule_activities(self) -> pd.DataFrame:
        return self.frame(Q.SCHEDULE_ACTIVITIES_ALL)

    # -------------------------------------------------------------------------
    # Reference tables
    # -------------------------------------------------------------------------

    def get_round_types(self) -> pd.DataFrame:
        return self.frame(Q.ROUND_TYPES_ALL)

    def get_countries(self) -> pd.DataFrame:
        return self.frame(Q.COUNTRIES_ALL)

    def get_events(self) -> pd.DataFrame:
        return self.frame(Q.EVENTS_ALL)
