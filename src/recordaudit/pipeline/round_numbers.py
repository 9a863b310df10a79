"""
Stage 2 — Round Sequencing

Assigns an ordinal round number to every round type used at a competition
event, so results (keyed by round type) can be joined to schedule round dates
(keyed by round number).

Output schema:
    competition_id  str
    event_id        str
    round_type_id   str
    round           int   1 = lowest-ranked round type of that competition event

Ordering is purely by round-type rank, never by when the round took place.
"""

from __future__ import annotations

import pandas as pd

ROUND_NUMBER_COLUMNS = ["competition_id", "event_id", "round_type_id", "round"]


def assign_round_numbers(results: pd.DataFrame, round_types: pd.DataFrame) -> pd.DataFrame:
    """Number the distinct round types of each (competition, event) by rank.

    Args:
        results: Audit-window results [competition_id, event_id, round_type_id]
        round_types: Reference table [id, rank]

    Returns:
        DataFrame with ROUND_NUMBER_COLUMNS.
    """
    rounds = results[["competition_id", "event_id", "round_type_id"]].drop_duplicates()
    ranks = round_types[["id", "rank"]].rename(columns={"id": "round_type_id"})
    rounds = rounds.merge(ranks, on="round_type_id", how="inner")

    # round_type_id breaks rank ties so numbering is deterministic
    rounds = rounds.sort_values(
        ["competition_id", "event_id", "rank", "round_type_id"], kind="mergesort"
    )
    rounds["round"] = rounds.groupby(["competition_id", "event_id"]).cumcount() + 1
    return rounds[ROUND_NUMBER_COLUMNS].reset_index(drop=True)
