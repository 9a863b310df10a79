"""Pytest fixtures/config for Record Audit tests."""

import os
import sqlite3
import sys

import pandas as pd
import pytest


def pytest_sessionstart(session) -> None:  # type: ignore[unused-argument]
    repo_root = os.path.dirname(os.path.dirname(__file__))
    src_path = os.path.join(repo_root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


ARCHIVE_SCHEMA = """
CREATE TABLE competitions (id TEXT PRIMARY KEY, start_date TEXT);
CREATE TABLE competition_venues (id INTEGER PRIMARY KEY, competition_id TEXT, timezone_id TEXT);
CREATE TABLE venue_rooms (id INTEGER PRIMARY KEY, competition_venue_id INTEGER);
CREATE TABLE schedule_activities (
    id INTEGER PRIMARY KEY,
    holder_type TEXT,
    holder_id INTEGER,
    activity_code TEXT,
    start_time TEXT,
    end_time TEXT
);
CREATE TABLE round_types (id TEXT PRIMARY KEY, "rank" INTEGER);
CREATE TABLE countries (id TEXT PRIMARY KEY, continent_id TEXT);
CREATE TABLE events (id TEXT PRIMARY KEY);
CREATE TABLE results (
    id INTEGER PRIMARY KEY,
    competition_id TEXT,
    event_id TEXT,
    round_type_id TEXT,
    person_id TEXT,
    country_id TEXT,
    best INTEGER,
    average INTEGER,
    regional_single_record TEXT,
    regional_average_record TEXT
);
"""

COUNTRIES = [
    ("Austria", "_Europe"),
    ("Belgium", "_Europe"),
    ("Japan", "_Asia"),
]

ROUND_TYPES = [("1", 10), ("2", 20), ("f", 100)]

EVENTS = [("333",), ("222",)]


@pytest.fixture
def countries() -> pd.DataFrame:
    """Two European countries and one Asian country."""
    return pd.DataFrame(COUNTRIES, columns=["id", "continent_id"])


@pytest.fixture
def round_types() -> pd.DataFrame:
    return pd.DataFrame(ROUND_TYPES, columns=["id", "rank"])


@pytest.fixture
def make_candidates():
    """Factory for candidate frames; unspecified columns get neutral defaults."""

    def _make(rows):
        defaults = {
            "competition_id": "Open2024",
            "event_id": "333",
            "round_type_id": "f",
            "round": 1,
            "person_id": "2010ABCD01",
            "country_id": "Austria",
            "best": 0,
            "average": 0,
            "stored_single": "",
            "stored_average": "",
            "old_nr_single": float("nan"),
            "old_nr_average": float("nan"),
            "day_best_single": 1.0,
            "day_best_average": 1.0,
        }
        frame = pd.DataFrame([{**defaults, **row} for row in rows])
        frame["round_date"] = pd.to_datetime(frame["round_date"])
        return frame

    return _make


@pytest.fixture
def build_archive(tmp_path):
    """Factory writing a small SQLite archive and returning its path.

    Reference tables (countries, round types, events) are always populated;
    the other tables take lists of row tuples in schema column order.
    """

    def _build(
        competitions=(),
        venues=(),
        rooms=(),
        activities=(),
        results=(),
        countries=COUNTRIES,
        name="archive.sqlite",
    ):
        db_path = tmp_path / name
        conn = sqlite3.connect(db_path)
        try:
            conn.executescript(ARCHIVE_SCHEMA)
            conn.executemany("INSERT INTO competitions VALUES (?, ?)", competitions)
            conn.executemany("INSERT INTO competition_venues VALUES (?, ?, ?)", venues)
            conn.executemany("INSERT INTO venue_rooms VALUES (?, ?)", rooms)
            conn.executemany(
                "INSERT INTO schedule_activities VALUES (?, ?, ?, ?, ?, ?)", activities
            )
            conn.executemany("INSERT INTO round_types VALUES (?, ?)", ROUND_TYPES)
            conn.executemany("INSERT INTO countries VALUES (?, ?)", countries)
            conn.executemany("INSERT INTO events VALUES (?)", EVENTS)
            conn.executemany(
                "INSERT INTO results VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", results
            )
            conn.commit()
        finally:
            conn.close()
        return str(db_path)

    return _build
