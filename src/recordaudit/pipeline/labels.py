"""
Stage 7 — Label Resolution

Collapses the scope flags of each metric into one calculated label:
WR, then the continental tag, then NR, else "". A broader scope always wins.
"""

from __future__ import annotations

import pandas as pd

from recordaudit.config import NATIONAL_RECORD, WORLD_RECORD


def resolve_label(frame: pd.DataFrame, metric: str) -> pd.Series:
    """Calculated label for one metric ("single" or "average")."""
    label = pd.Series("", index=frame.index, dtype=object)
    # Narrowest scope first, so broader scopes overwrite it
    label = label.mask(frame[f"nr_{metric}"], NATIONAL_RECORD)
    label = label.mask(frame[f"cr_{metric}"], frame["cr_id"])
    label = label.mask(frame[f"wr_{metric}"], WORLD_RECORD)
    return label


def resolve_labels(evaluated: pd.DataFrame) -> pd.DataFrame:
    """Add calculated_single and calculated_average."""
    df = evaluated.copy()
    df["calculated_single"] = resolve_label(df, "single")
    df["calculated_average"] = resolve_label(df, "average")
    return df
