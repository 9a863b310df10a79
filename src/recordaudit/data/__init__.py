"""Data module - archive access, input snapshot, and schemas.

Public API:
    ArchiveReader - Read-only SQLite archive access
    ArchiveSnapshot - Validated input frames for one audit run
    Correction - Machine-applicable fix for a stored record label
    ResultSchema, RoundTypeSchema, etc. - Pydantic models
"""

from recordaudit.data.reader import ArchiveReader
from recordaudit.data.reference import ArchiveSnapshot
from recordaudit.data.schemas import (
    CompetitionSchema,
    Correction,
    CountrySchema,
    EventSchema,
    ResultSchema,
    RoundTypeSchema,
    ScheduleActivitySchema,
    VenueSchema,
)

__all__ = [
    "ArchiveReader",
    "ArchiveSnapshot",
    "Correction",
    "CompetitionSchema",
    "CountrySchema",
    "EventSchema",
    "ResultSchema",
    "RoundTypeSchema",
    "ScheduleActivitySchema",
    "VenueSchema",
]
