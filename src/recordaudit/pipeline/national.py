"""
Stage 5 — National Records

Flags national-record singles and averages among the candidates.

Per (country_id, event_id), ordered by round date, a result is an NR when its
value equals the running minimum of eligible values; eligible means positive
and not worse than the country's pre-year NR (or no pre-year NR exists).
Same-day results see each other, and every result matching the minimum is
flagged, including a later result tying an earlier one.
"""

from __future__ import annotations

import logging

import pandas as pd

from recordaudit.pipeline.running_min import eligible_against, flag_running_minimum

logger = logging.getLogger(__name__)

NATIONAL_PARTITION = ["country_id", "event_id"]
NATIONAL_ORDER = ["round_date"]


def evaluate_national_records(candidates: pd.DataFrame) -> pd.DataFrame:
    """Add nr_single and nr_average flags.

    Args:
        candidates: Output of filter_candidates()

    Returns:
        Copy of candidates with boolean nr_single and nr_average columns.
    """
    df = candidates.copy()
    df["nr_single"] = flag_running_minimum(
        df,
        "best",
        NATIONAL_PARTITION,
        NATIONAL_ORDER,
        eligible_against(df["best"], df["old_nr_single"]),
    )
    df["nr_average"] = flag_running_minimum(
        df,
        "average",
        NATIONAL_PARTITION,
        NATIONAL_ORDER,
        eligible_against(df["average"], df["old_nr_average"]),
    )
    logger.debug(
        f"NR flags: {int(df['nr_single'].sum())} single, {int(df['nr_average'].sum())} average"
    )
    return df
