"""
Stage 8 — Discrepancy Report

Compares calculated labels with stored labels and describes, per metric, the
action needed to make the archive consistent. Nothing is written back: each
action comes with a Correction for a separate update step to apply.

Actions:
    stored "",  calculated X   -> "add X"
    stored X,   calculated ""  -> "remove X"
    stored X,   calculated Y   -> "replace X with Y"
    stored X,   calculated X   -> no action

Output schema (one row per result needing at least one action):
    result_id, round_date, person_id, country_id, continent_id,
    competition_id, event_id, round, best, average,
    stored_single, calculated_single, stored_average, calculated_average,
    single_action, average_action, corrections, sql
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from recordaudit.config import AVERAGE_RECORD_FIELD, SINGLE_RECORD_FIELD
from recordaudit.data.schemas import Correction

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "result_id",
    "round_date",
    "person_id",
    "country_id",
    "continent_id",
    "competition_id",
    "event_id",
    "round",
    "best",
    "average",
    "stored_single",
    "calculated_single",
    "stored_average",
    "calculated_average",
    "single_action",
    "average_action",
    "corrections",
    "sql",
]


def describe_action(stored: str, calculated: str) -> Optional[str]:
    """Human-readable action turning stored into calculated, or None."""
    if stored == calculated:
        return None
    if not stored:
        return f"add {calculated}"
    if not calculated:
        return f"remove {stored}"
    return f"replace {stored} with {calculated}"


def correction_for(
    result_id: int,
    field: str,
    stored: str,
    calculated: str,
) -> Optional[Correction]:
    if stored == calculated:
        return None
    return Correction(result_id=result_id, field=field, value=calculated or None)


def corrections_for(row: pd.Series) -> List[Correction]:
    """Corrections for both metrics of one labelled row."""
    fixes = [
        correction_for(
            int(row["id"]), SINGLE_RECORD_FIELD,
            row["stored_single"], row["calculated_single"],
        ),
        correction_for(
            int(row["id"]), AVERAGE_RECORD_FIELD,
            row["stored_average"], row["calculated_average"],
        ),
    ]
    return [fix for fix in fixes if fix is not None]


def build_discrepancies(labelled: pd.DataFrame) -> pd.DataFrame:
    """Build the discrepancy report from labelled results.

    Args:
        labelled: Output of resolve_labels()

    Returns:
        DataFrame with REPORT_COLUMNS, sorted by result_id.
    """
    mismatch = (
        (labelled["stored_single"] != labelled["calculated_single"])
        | (labelled["stored_average"] != labelled["calculated_average"])
    )
    df = labelled[mismatch].copy()

    df["single_action"] = [
        describe_action(s, c) for s, c in zip(df["stored_single"], df["calculated_single"])
    ]
    df["average_action"] = [
        describe_action(s, c) for s, c in zip(df["stored_average"], df["calculated_average"])
    ]
    df["corrections"] = pd.Series(
        [corrections_for(row) for _, row in df.iterrows()], index=df.index, dtype=object
    )
    df["sql"] = [" ".join(fix.to_sql() for fix in fixes) for fixes in df["corrections"]]

    report = (
        df.rename(columns={"id": "result_id"})[REPORT_COLUMNS]
        .sort_values("result_id")
        .reset_index(drop=True)
    )
    logger.info(f"Found {len(report):,} results with inconsistent record labels")
    return report


def collect_corrections(report: pd.DataFrame) -> List[Correction]:
    """Flatten the report into the ordered list of corrections."""
    return [fix for fixes in report["corrections"] for fix in fixes]
