"""
Stage 1 — Round Date Resolution

Derives the calendar date of every scheduled round from the competition
schedule. A round may span several scheduled blocks (groups, attempts); its
date is the local date of the block that finishes last.

Inputs:
    schedule activities (UTC end instants, venue-room holders)
    venues (venue room -> competition, timezone)
    recognized events

Output schema:
    competition_id  str
    event_id        str
    round           int       Round number parsed from the activity code
    round_date      datetime  Local date (midnight) of the latest end time

Rounds with no schedule entry are absent; the candidate stage falls back to
the competition start date for them.
"""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from recordaudit.config import VENUE_ROOM_HOLDER

logger = logging.getLogger(__name__)

# "333-r1", "333fm-r2-a1", "444bf-r1-g2": event before the first dash, round after "-r"
ACTIVITY_CODE_PATTERN = r"^(?P<event_id>[^-]+)-r(?P<round>\d+)"

ROUND_DATE_COLUMNS = ["competition_id", "event_id", "round", "round_date"]


def empty_round_dates() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "competition_id": pd.Series(dtype=object),
            "event_id": pd.Series(dtype=object),
            "round": pd.Series(dtype="int64"),
            "round_date": pd.Series(dtype="datetime64[ns]"),
        }
    )


def parse_activity_codes(activities: pd.DataFrame) -> pd.DataFrame:
    """Split activity codes into event_id and round.

    Codes that do not describe a round (breaks, ceremonies) are dropped.
    """
    parts = activities["activity_code"].astype(str).str.extract(ACTIVITY_CODE_PATTERN)
    parsed = activities.assign(event_id=parts["event_id"], round=parts["round"])
    parsed = parsed.dropna(subset=["event_id", "round"])
    return parsed.assign(round=parsed["round"].astype("int64"))


def to_local_time(end_times: pd.Series, timezones: pd.Series) -> pd.Series:
    """Convert UTC instants to naive local wall-clock times.

    Args:
        end_times: UTC instants (strings or datetimes)
        timezones: IANA timezone name per row

    Raises:
        ValueError: If a timezone name is unknown.
    """
    utc = pd.to_datetime(end_times, utc=True, format="ISO8601")
    pieces = []
    for tz, index in timezones.groupby(timezones).groups.items():
        try:
            local = utc.loc[index].dt.tz_convert(tz).dt.tz_localize(None)
        except KeyError as e:
            raise ValueError(f"[round_dates] Unknown timezone {tz!r}") from e
        pieces.append(local)
    if not pieces:
        return pd.Series(index=end_times.index, dtype="datetime64[ns]")
    return pd.concat(pieces).reindex(end_times.index)


def resolve_round_dates(
    activities: pd.DataFrame,
    venues: pd.DataFrame,
    events: Iterable[str],
) -> pd.DataFrame:
    """Map each (competition, event, round) to the local date it last finishes.

    Args:
        activities: Schedule activities [holder_type, holder_id, activity_code, end_time]
        venues: Venue rooms [venue_room_id, competition_id, timezone_id]
        events: Recognized event ids

    Returns:
        DataFrame with ROUND_DATE_COLUMNS, one row per scheduled round.
    """
    rooms = activities[activities["holder_type"] == VENUE_ROOM_HOLDER]
    if rooms.empty:
        return empty_round_dates()

    parsed = parse_activity_codes(rooms)
    parsed = parsed[parsed["event_id"].isin(set(events))]

    scheduled = parsed.merge(
        venues[["venue_room_id", "competition_id", "timezone_id"]],
        left_on="holder_id",
        right_on="venue_room_id",
        how="inner",
    )
    if scheduled.empty:
        return empty_round_dates()

    scheduled = scheduled.assign(
        local_end=to_local_time(scheduled["end_time"], scheduled["timezone_id"])
    )

    round_dates = (
        scheduled.groupby(["competition_id", "event_id", "round"], as_index=False)["local_end"]
        .max()
        .rename(columns={"local_end": "round_date"})
    )
    round_dates["round_date"] = round_dates["round_date"].dt.normalize()

    logger.info(f"Resolved dates for {len(round_dates):,} scheduled rounds")
    return round_dates[ROUND_DATE_COLUMNS]
