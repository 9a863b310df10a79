"""Pydantic schemas for archive data validation.

Defines Pydantic models for archive rows and for the corrective instructions
emitted by the audit. Reference rows are validated before any pipeline stage
runs, so malformed input fails at load time rather than mid-computation.

Models:
    ResultSchema - One result row (values and stored labels)
    CompetitionSchema - Competition with optional start date
    VenueSchema - Venue room with competition and timezone
    ScheduleActivitySchema - Scheduled activity with UTC end instant
    RoundTypeSchema, CountrySchema, EventSchema - Reference tables
    Correction - Machine-applicable fix for one stored label

Usage:
    from recordaudit.data.schemas import Correction

    fix = Correction(result_id=7, field="regional_single_record", value="NR")
    print(fix.to_sql())
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type

import pandas as pd
from pydantic import BaseModel, ValidationError, field_validator

from recordaudit.config import (
    ARCHIVE_FIELD_NAMES,
    ARCHIVE_RESULTS_TABLE,
    RECORD_LABELS,
)


class ResultSchema(BaseModel):
    """Result of one person in one round."""

    id: int
    competition_id: str
    event_id: str
    round_type_id: str
    person_id: str
    country_id: str
    best: int = 0
    average: int = 0
    regional_single_record: str = ""
    regional_average_record: str = ""

    @field_validator("regional_single_record", "regional_average_record", mode="before")
    @classmethod
    def _normalize_label(cls, value: Any) -> str:
        label = "" if value is None else str(value)
        if label not in RECORD_LABELS:
            raise ValueError(f"unknown record label {label!r}")
        return label


class CompetitionSchema(BaseModel):
    """Competition metadata (start date is the round-date fallback)."""

    id: str
    start_date: Optional[date] = None


class VenueSchema(BaseModel):
    """Venue room joined to its competition venue."""

    venue_room_id: int
    competition_id: str
    timezone_id: str


class ScheduleActivitySchema(BaseModel):
    """Scheduled activity; end_time is an archive (UTC) instant."""

    id: int
    holder_type: str
    holder_id: int
    activity_code: str
    start_time: Optional[datetime] = None
    end_time: datetime


class RoundTypeSchema(BaseModel):
    """Round type with its ordering rank."""

    id: str
    rank: int


class CountrySchema(BaseModel):
    id: str
    continent_id: str


class EventSchema(BaseModel):
    id: str


class Correction(BaseModel):
    """Corrective instruction for one stored label.

    value=None means the field must be cleared.
    """

    result_id: int
    field: str
    value: Optional[str] = None

    @field_validator("field")
    @classmethod
    def _known_field(cls, value: str) -> str:
        if value not in ARCHIVE_FIELD_NAMES:
            raise ValueError(f"unknown record field {value!r}")
        return value

    @property
    def is_clear(self) -> bool:
        return self.value is None

    def to_sql(self) -> str:
        """Render the UPDATE statement applying this correction."""
        column = ARCHIVE_FIELD_NAMES[self.field]
        new_value = "NULL" if self.is_clear else f"'{self.value}'"
        return (
            f"UPDATE {ARCHIVE_RESULTS_TABLE} SET {column} = {new_value} "
            f"WHERE id = {self.result_id};"
        )


def validate_rows(
    table: str,
    frame: pd.DataFrame,
    schema: Type[BaseModel],
) -> List[BaseModel]:
    """Validate every row of a reference frame against a schema.

    Args:
        table: Table name used in error messages
        frame: Rows to validate
        schema: Pydantic model class

    Returns:
        Validated model instances, in frame order.

    Raises:
        ValueError: On the first invalid row, naming table and row id.
    """
    validated = []
    for row in frame.to_dict("records"):
        clean: Dict[str, Any] = {
            key: (None if _is_missing(value) else value) for key, value in row.items()
        }
        try:
            validated.append(schema.model_validate(clean))
        except ValidationError as e:
            row_id = clean.get("id", clean.get("venue_room_id", "unknown"))
            raise ValueError(f"Invalid row in {table} (id={row_id}): {e}") from e
    return validated


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
