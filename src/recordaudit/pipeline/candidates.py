"""
Stage 4 — Candidate Selection

Narrows the audit-window results to those that can plausibly hold a record,
without changing which results are records. A result that is not even the best
of its own country on its own day cannot be any tier of record.

Construction Rules:
    - round_date = scheduled round date, else competition start date
    - results with no date at all are excluded with a warning
    - results with no valid single, no valid average and no stored label
      have nothing to evaluate and are dropped
    - rank per (country_id, event_id, round_date) by single and by average,
      invalid values last, ties share the rank
    - keep rank 1 in either ranking, or any result carrying a stored label

Output schema (one row per candidate result):
    id, competition_id, event_id, round_type_id, round, round_date,
    person_id, country_id, best, average, stored_single, stored_average,
    old_nr_single, old_nr_average, day_best_single, day_best_average
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from recordaudit.config import AVERAGE_RECORD_FIELD, SINGLE_RECORD_FIELD

logger = logging.getLogger(__name__)

DAY_GROUP = ["country_id", "event_id", "round_date"]

CANDIDATE_COLUMNS = [
    "id",
    "competition_id",
    "event_id",
    "round_type_id",
    "round",
    "round_date",
    "person_id",
    "country_id",
    "best",
    "average",
    "stored_single",
    "stored_average",
    "old_nr_single",
    "old_nr_average",
    "day_best_single",
    "day_best_average",
]


def ranking_value(values: pd.Series) -> pd.Series:
    """Map non-positive values to +inf so they rank after every valid value."""
    return values.where(values > 0, np.inf).astype(float)


def has_stored_label(frame: pd.DataFrame) -> pd.Series:
    return (frame["stored_single"] != "") | (frame["stored_average"] != "")


def attach_round_dates(
    results: pd.DataFrame,
    round_numbers: pd.DataFrame,
    round_dates: pd.DataFrame,
    competitions: pd.DataFrame,
) -> pd.DataFrame:
    """Join round number and resolved round date onto each result."""
    df = results.merge(
        round_numbers,
        on=["competition_id", "event_id", "round_type_id"],
        how="left",
    )
    df = df.merge(round_dates, on=["competition_id", "event_id", "round"], how="left")

    starts = competitions[["id", "start_date"]].rename(
        columns={"id": "competition_id", "start_date": "competition_start"}
    )
    starts["competition_start"] = pd.to_datetime(starts["competition_start"])
    df = df.merge(starts, on="competition_id", how="left")

    df["round_date"] = pd.to_datetime(df["round_date"]).fillna(df["competition_start"])
    return df.drop(columns=["competition_start"])


def filter_candidates(
    results: pd.DataFrame,
    round_numbers: pd.DataFrame,
    round_dates: pd.DataFrame,
    competitions: pd.DataFrame,
    national_baselines: pd.DataFrame,
) -> pd.DataFrame:
    """Select results that may be records and attach their NR baselines.

    Args:
        results: Audit-window results
        round_numbers: Output of assign_round_numbers()
        round_dates: Output of resolve_round_dates()
        competitions: Reference table [id, start_date]
        national_baselines: Baselines.national

    Returns:
        DataFrame with CANDIDATE_COLUMNS, sorted by result id.
    """
    df = attach_round_dates(results, round_numbers, round_dates, competitions)
    df["stored_single"] = df[SINGLE_RECORD_FIELD].fillna("")
    df["stored_average"] = df[AVERAGE_RECORD_FIELD].fillna("")

    undated = df["round_date"].isna()
    if undated.any():
        logger.warning(
            f"[candidates] Excluding {int(undated.sum())} results with neither a "
            f"round date nor a competition start date: {df.loc[undated, 'id'].tolist()[:10]}"
        )
        df = df[~undated]

    evaluable = (df["best"] > 0) | (df["average"] > 0) | has_stored_label(df)
    df = df[evaluable].copy()

    day_keys = [df[c] for c in DAY_GROUP]
    df["day_best_single"] = ranking_value(df["best"]).groupby(day_keys).rank(method="min")
    df["day_best_average"] = ranking_value(df["average"]).groupby(day_keys).rank(method="min")

    keep = (
        (df["day_best_single"] == 1)
        | (df["day_best_average"] == 1)
        | has_stored_label(df)
    )
    df = df[keep]

    baselines = national_baselines[["country_id", "event_id", "old_single", "old_average"]].rename(
        columns={"old_single": "old_nr_single", "old_average": "old_nr_average"}
    )
    df = df.merge(baselines, on=["country_id", "event_id"], how="left")

    candidates = df[CANDIDATE_COLUMNS].sort_values("id").reset_index(drop=True)
    logger.info(f"Selected {len(candidates):,} candidates from {len(results):,} results")
    return candidates


def enforce_candidate_contract(candidates: pd.DataFrame) -> None:
    """
    Enforce the candidate-stage contract.

    A violation here is a defect in filter_candidates(), not a data error.
    Raises AssertionError if any check fails.
    """
    # Check 1: Expected columns present
    assert list(candidates.columns) == CANDIDATE_COLUMNS, (
        f"Column mismatch. Expected {CANDIDATE_COLUMNS}, got {list(candidates.columns)}"
    )

    # Check 2: One row per result
    duplicates = candidates["id"].duplicated().sum()
    assert duplicates == 0, f"Found {duplicates} duplicate result ids"

    # Check 3: Every candidate is dated
    undated = candidates["round_date"].isna().sum()
    assert undated == 0, f"Found {undated} candidates without a round date"

    # Check 4: Nothing to evaluate means the row should have been dropped
    empty = (
        (candidates["best"] <= 0)
        & (candidates["average"] <= 0)
        & ~has_stored_label(candidates)
    )
    assert not empty.any(), (
        f"Found {int(empty.sum())} candidates with no valid value and no stored label: "
        f"{candidates.loc[empty, 'id'].tolist()[:10]}"
    )
