"""Centralized configuration for Record Audit.

All paths, record labels, and run settings in one place.
Environment variables can override defaults.

Path Constants:
    PROJECT_ROOT - Root directory of the project
    STORAGE_DIR - Storage for the archive database and reports
    REPORTS_DIR - Discrepancy reports written by the CLI
    DEFAULT_DB_PATH - SQLite archive (overridable via RECORDAUDIT_DB_PATH)

Record Constants:
    NATIONAL_RECORD, WORLD_RECORD - Scope-independent labels
    CONTINENT_RECORD_TAGS - Continent id -> continental record tag
    RECORD_LABELS - Every label a result may carry
    ARCHIVE_FIELD_NAMES - Result field -> archive column name

Environment Variables:
    RECORDAUDIT_DB_PATH - Override default database path
    RECORDAUDIT_YEAR - Override default target year
    RECORDAUDIT_N_JOBS - Override number of parallel evaluation workers
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

# Project root (src/recordaudit/config.py -> recordaudit -> src -> project_root)
PROJECT_ROOT = Path(__file__).parent.parent.parent
STORAGE_DIR = PROJECT_ROOT / "storage"
REPORTS_DIR = STORAGE_DIR / "reports"

DEFAULT_DB_PATH = os.environ.get(
    "RECORDAUDIT_DB_PATH",
    str(STORAGE_DIR / "archive.sqlite")
)

DEFAULT_YEAR = int(os.environ.get("RECORDAUDIT_YEAR", date.today().year))
DEFAULT_N_JOBS = int(os.environ.get("RECORDAUDIT_N_JOBS", 1))

# Record labels
NATIONAL_RECORD = "NR"
WORLD_RECORD = "WR"

CONTINENT_RECORD_TAGS = {
    "_Africa": "AfR",
    "_Asia": "AsR",
    "_Europe": "ER",
    "_Oceania": "OcR",
    "_North America": "NAR",
    "_South America": "SAR",
}

RECORD_LABELS = frozenset(
    {"", NATIONAL_RECORD, WORLD_RECORD, *CONTINENT_RECORD_TAGS.values()}
)

# Result fields carrying stored labels, and their archive column names
SINGLE_RECORD_FIELD = "regional_single_record"
AVERAGE_RECORD_FIELD = "regional_average_record"
ARCHIVE_FIELD_NAMES = {
    SINGLE_RECORD_FIELD: "regionalSingleRecord",
    AVERAGE_RECORD_FIELD: "regionalAverageRecord",
}
ARCHIVE_RESULTS_TABLE = "Results"

# Schedule holders that carry a venue timezone
VENUE_ROOM_HOLDER = "VenueRoom"


@dataclass
class AuditConfig:
    """Settings for one audit run.

    Attributes:
        year: Target year. Baselines are frozen at the end of year - 1.
        end_year: Last competition year audited (None = no upper bound).
        n_jobs: Workers for per-event evaluation (1 = sequential).
    """

    year: int = field(default=DEFAULT_YEAR)
    end_year: Optional[int] = None
    n_jobs: int = field(default=DEFAULT_N_JOBS)

    def __post_init__(self) -> None:
        if self.end_year is not None and self.end_year < self.year:
            raise ValueError(
                f"end_year ({self.end_year}) must not precede year ({self.year})"
            )
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")
