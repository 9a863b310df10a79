"""
Stage 6 — Continental and World Records

Flags continental (CR) and world (WR) records, for single and average, among
results that are national records or already carry a stored label. A CR or WR
must at least be an NR; stored labels are kept so they can be re-validated.

Scans:
    CR  per (event_id, continent_id)
    WR  per (event_id)

Both order by round date, then by the metric value itself. The secondary key
is specific to this stage: the national scan orders by date alone.

Continent ids map to a record tag through CONTINENT_RECORD_TAGS. A continent
without a tag aborts the run.
"""

from __future__ import annotations

import logging

import pandas as pd

from recordaudit.config import CONTINENT_RECORD_TAGS
from recordaudit.pipeline.candidates import has_stored_label
from recordaudit.pipeline.running_min import eligible_against, flag_running_minimum

logger = logging.getLogger(__name__)

CONTINENTAL_PARTITION = ["event_id", "continent_id"]
WORLD_PARTITION = ["event_id"]


def attach_continents(frame: pd.DataFrame, countries: pd.DataFrame) -> pd.DataFrame:
    """Add continent_id and its record tag (cr_id).

    Raises:
        ValueError: If a continent has no record tag.
    """
    continents = countries[["id", "continent_id"]].rename(columns={"id": "country_id"})
    df = frame.merge(continents, on="country_id", how="left")
    df["cr_id"] = df["continent_id"].map(CONTINENT_RECORD_TAGS)

    unmapped = df[df["cr_id"].isna()]
    if not unmapped.empty:
        missing = sorted(unmapped["continent_id"].astype(str).unique())
        raise ValueError(
            f"[regional] No continental record tag for continent(s) {missing} "
            f"(results {unmapped['id'].tolist()[:10]})"
        )
    return df


def evaluate_regional_records(
    national: pd.DataFrame,
    countries: pd.DataFrame,
    continental_baselines: pd.DataFrame,
    world_baselines: pd.DataFrame,
) -> pd.DataFrame:
    """Add cr_single, cr_average, wr_single and wr_average flags.

    Args:
        national: Output of evaluate_national_records()
        countries: Reference table [id, continent_id]
        continental_baselines: Baselines.continental
        world_baselines: Baselines.world

    Returns:
        NR or stored-label rows with continent_id, cr_id and the four flags.
    """
    keep = national["nr_single"] | national["nr_average"] | has_stored_label(national)
    df = attach_continents(national[keep], countries)

    df = df.merge(
        continental_baselines[["continent_id", "event_id", "old_single", "old_average"]].rename(
            columns={"old_single": "old_cr_single", "old_average": "old_cr_average"}
        ),
        on=["continent_id", "event_id"],
        how="left",
    )
    df = df.merge(
        world_baselines[["event_id", "old_single", "old_average"]].rename(
            columns={"old_single": "old_wr_single", "old_average": "old_wr_average"}
        ),
        on="event_id",
        how="left",
    )

    df["cr_single"] = flag_running_minimum(
        df, "best", CONTINENTAL_PARTITION, ["round_date", "best"],
        eligible_against(df["best"], df["old_cr_single"]),
    )
    df["cr_average"] = flag_running_minimum(
        df, "average", CONTINENTAL_PARTITION, ["round_date", "average"],
        eligible_against(df["average"], df["old_cr_average"]),
    )
    df["wr_single"] = flag_running_minimum(
        df, "best", WORLD_PARTITION, ["round_date", "best"],
        eligible_against(df["best"], df["old_wr_single"]),
    )
    df["wr_average"] = flag_running_minimum(
        df, "average", WORLD_PARTITION, ["round_date", "average"],
        eligible_against(df["average"], df["old_wr_average"]),
    )
    return df.reset_index(drop=True)
