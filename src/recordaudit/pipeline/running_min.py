"""Cumulative-minimum scan shared by every record evaluator.

A result holds a record for a scope when its value equals the smallest
eligible value seen so far in its partition, scanning in ordering-key order.
"Seen so far" includes peers: rows with the same partition and the same
ordering key are accumulated together before any of them is compared, so
tied results are all flagged.

The national evaluator orders by round date alone; the continental and world
evaluators order by round date and then by the value itself.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np
import pandas as pd


def eligible_against(values: pd.Series, baseline: pd.Series) -> pd.Series:
    """Valid (positive) values not worse than the scope baseline.

    A missing baseline means the scope had no prior record: any valid value
    is eligible.
    """
    return (values > 0) & values.le(baseline.astype(float).fillna(np.inf))


def running_minimum(
    frame: pd.DataFrame,
    value_col: str,
    partition_cols: List[str],
    order_cols: List[str],
    eligible: pd.Series,
) -> pd.Series:
    """Best eligible value per row, up to and including the row's peers.

    Args:
        frame: Rows to scan (unique index)
        value_col: Column holding the metric value
        partition_cols: Columns defining independent scans
        order_cols: Scan order within a partition
        eligible: Boolean mask; ineligible values never enter the minimum

    Returns:
        Float Series aligned to frame.index; NaN where no eligible value
        has been seen yet.
    """
    running = pd.Series(np.nan, index=frame.index, dtype=float)
    if frame.empty:
        return running

    keys = partition_cols + order_cols
    scan = frame[keys].assign(_value=frame[value_col].where(eligible).astype(float))
    best_so_far: Dict[Tuple, float] = {}
    n_partition = len(partition_cols)

    # groupby(sort=True) yields peer groups in ascending key order
    for peer_key, peers in scan.groupby(keys, sort=True):
        partition = peer_key[:n_partition]
        current = best_so_far.get(partition, np.nan)
        peer_best = peers["_value"].min()
        if not np.isnan(peer_best) and (np.isnan(current) or peer_best < current):
            current = peer_best
            best_so_far[partition] = current
        running.loc[peers.index] = current

    return running


def flag_running_minimum(
    frame: pd.DataFrame,
    value_col: str,
    partition_cols: List[str],
    order_cols: List[str],
    eligible: pd.Series,
) -> pd.Series:
    """True where the row's value equals its running minimum."""
    running = running_minimum(frame, value_col, partition_cols, order_cols, eligible)
    return (frame[value_col].astype(float) == running).astype(bool)
