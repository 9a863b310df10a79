"""
Stage 3 — Baseline Snapshot

Freezes, per scope, the best single and best average recorded before the
target year. These are the values a target-year result must match or beat to
be a record, and they never change while the pipeline runs.

Scopes:
    national     (country_id, event_id)
    continental  (continent_id, event_id)
    world        (event_id)

Each scope frame has columns old_single and old_average; NaN means the scope
has no valid prior value for that metric, i.e. no limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import pandas as pd

logger = logging.getLogger(__name__)

NATIONAL_SCOPE = ["country_id", "event_id"]
CONTINENTAL_SCOPE = ["continent_id", "event_id"]
WORLD_SCOPE = ["event_id"]


@dataclass(frozen=True)
class Baselines:
    """Pre-year record values for every scope."""

    national: pd.DataFrame
    continental: pd.DataFrame
    world: pd.DataFrame

    def for_event(self, event_id: str) -> "Baselines":
        """Restrict every scope to a single event."""
        return Baselines(
            national=self.national[self.national["event_id"] == event_id],
            continental=self.continental[self.continental["event_id"] == event_id],
            world=self.world[self.world["event_id"] == event_id],
        )


def _scope_minimum(history: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    baselines = history.groupby(keys, as_index=False)[["old_single", "old_average"]].min()
    return baselines.dropna(subset=["old_single", "old_average"], how="all").reset_index(drop=True)


def compute_baselines(history: pd.DataFrame, countries: pd.DataFrame) -> Baselines:
    """Compute national, continental and world baselines.

    Args:
        history: Results dated before the target year [country_id, event_id, best, average]
        countries: Reference table [id, continent_id]

    Returns:
        Baselines with one frame per scope.
    """
    continents = countries[["id", "continent_id"]].rename(columns={"id": "country_id"})
    valid = history[["country_id", "event_id", "best", "average"]].merge(
        continents, on="country_id", how="left"
    )
    # Non-positive values mean "no result" and must never become a minimum
    valid = valid.assign(
        old_single=valid["best"].where(valid["best"] > 0),
        old_average=valid["average"].where(valid["average"] > 0),
    )

    baselines = Baselines(
        national=_scope_minimum(valid, NATIONAL_SCOPE),
        continental=_scope_minimum(valid, CONTINENTAL_SCOPE),
        world=_scope_minimum(valid, WORLD_SCOPE),
    )
    logger.info(
        f"Baselines: {len(baselines.national):,} national, "
        f"{len(baselines.continental):,} continental, {len(baselines.world):,} world"
    )
    return baselines
