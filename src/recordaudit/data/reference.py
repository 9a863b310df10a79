"""Materialized input snapshot for one audit run.

Bundles every frame the pipeline reads (results, history, schedule and
reference tables) and validates it before any stage runs. Stages never query
the archive themselves; they only see this snapshot.

Key Classes:
    ArchiveSnapshot - Frozen input frames plus load-time validation

Usage:
    from recordaudit.data import ArchiveReader, ArchiveSnapshot

    snapshot = ArchiveSnapshot.load(ArchiveReader(), year=2024)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from recordaudit.data.reader import ArchiveReader
from recordaudit.data.schemas import (
    CompetitionSchema,
    CountrySchema,
    EventSchema,
    ResultSchema,
    RoundTypeSchema,
    ScheduleActivitySchema,
    VenueSchema,
    validate_rows,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveSnapshot:
    """Read-only input frames for the pipeline."""

    results: pd.DataFrame
    history: pd.DataFrame
    competitions: pd.DataFrame
    venues: pd.DataFrame
    activities: pd.DataFrame
    round_types: pd.DataFrame
    countries: pd.DataFrame
    events: pd.DataFrame

    @classmethod
    def load(
        cls,
        reader: ArchiveReader,
        year: int,
        end_year: Optional[int] = None,
    ) -> "ArchiveSnapshot":
        """Read every input frame from the archive and validate it."""
        snapshot = cls(
            results=reader.get_results(year, end_year),
            history=reader.get_history(year),
            competitions=reader.get_competitions(),
            venues=reader.get_venues(),
            activities=reader.get_schedule_activities(),
            round_types=reader.get_round_types(),
            countries=reader.get_countries(),
            events=reader.get_events(),
        )
        snapshot.validate()
        logger.info(
            f"Loaded {len(snapshot.results):,} results from {year}"
            f"{'' if end_year is None else f' to {end_year}'}, "
            f"{len(snapshot.history):,} historical results"
        )
        return snapshot

    def validate(self) -> None:
        """Reject malformed or inconsistent reference data.

        Raises:
            ValueError: If any row fails its schema, or a result refers to an
                unknown event, round type, country or competition.
        """
        validate_rows("round_types", self.round_types, RoundTypeSchema)
        validate_rows("countries", self.countries, CountrySchema)
        validate_rows("events", self.events, EventSchema)
        validate_rows("competitions", self.competitions, CompetitionSchema)
        validate_rows("venues", self.venues, VenueSchema)
        validate_rows("schedule_activities", self.activities, ScheduleActivitySchema)
        validate_rows("results", self.results, ResultSchema)

        if self.round_types["id"].duplicated().any():
            dupes = self.round_types.loc[self.round_types["id"].duplicated(), "id"].tolist()
            raise ValueError(f"Duplicate round types: {dupes}")
        if self.countries["id"].duplicated().any():
            dupes = self.countries.loc[self.countries["id"].duplicated(), "id"].tolist()
            raise ValueError(f"Countries mapped to more than one continent: {dupes}")

        references = [
            ("results", self.results, "event_id", self.events["id"], "event"),
            ("results", self.results, "round_type_id", self.round_types["id"], "round type"),
            ("results", self.results, "country_id", self.countries["id"], "country"),
            ("results", self.results, "competition_id", self.competitions["id"], "competition"),
            ("history", self.history, "event_id", self.events["id"], "event"),
            ("history", self.history, "country_id", self.countries["id"], "country"),
        ]
        for table, frame, column, known, label in references:
            self._check_references(table, frame, column, known, label)

    @staticmethod
    def _check_references(
        table: str,
        frame: pd.DataFrame,
        column: str,
        known: pd.Series,
        label: str,
    ) -> None:
        unknown = frame.loc[~frame[column].isin(set(known)), ["id", column]]
        if not unknown.empty:
            sample = unknown.head(3).to_dict("records")
            raise ValueError(
                f"{len(unknown)} rows of {table} refer to an unknown {label}: {sample}"
            )
