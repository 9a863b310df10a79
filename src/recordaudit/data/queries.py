"""Centralized SQL queries for archive access.

All SQL statements used by ArchiveReader live here.
Named constants for clarity and single source of truth.
"""

# -----------------------------------------------------------------------------
# Result queries
# -----------------------------------------------------------------------------

# Competition ids end with their year ("Open2024"). Taking the year from the id
# keeps results of competitions without a start date in the window.
COMPETITION_YEAR = "CAST(substr(r.competition_id, -4) AS INTEGER)"

RESULTS_BASE = """
SELECT r.id,
       r.competition_id,
       r.event_id,
       r.round_type_id,
       r.person_id,
       r.country_id,
       COALESCE(r.best, 0) AS best,
       COALESCE(r.average, 0) AS average,
       COALESCE(r.regional_single_record, '') AS regional_single_record,
       COALESCE(r.regional_average_record, '') AS regional_average_record
FROM results r
"""

RESULTS_FROM_YEAR = RESULTS_BASE + """
WHERE """ + COMPETITION_YEAR + """ >= ?
ORDER BY r.id
"""

RESULTS_YEAR_RANGE = RESULTS_BASE + """
WHERE """ + COMPETITION_YEAR + """ BETWEEN ? AND ?
ORDER BY r.id
"""

RESULTS_BEFORE_YEAR = """
SELECT r.id, r.country_id, r.event_id,
       COALESCE(r.best, 0) AS best,
       COALESCE(r.average, 0) AS average
FROM results r
WHERE """ + COMPETITION_YEAR + """ < ?
"""

# -----------------------------------------------------------------------------
# Competition / schedule queries
# -----------------------------------------------------------------------------

COMPETITIONS_ALL = "SELECT id, start_date FROM competitions ORDER BY id"

VENUES_ALL = """
SELECT vr.id AS venue_room_id,
       cv.competition_id,
       cv.timezone_id
FROM venue_rooms vr
JOIN competition_venues cv ON vr.competition_venue_id = cv.id
ORDER BY vr.id
"""

SCHEDULE_ACTIVITIES_ALL = """
SELECT id, holder_type, holder_id, activity_code, start_time, end_time
FROM schedule_activities
ORDER BY id
"""

# -----------------------------------------------------------------------------
# Reference tables
# -----------------------------------------------------------------------------

ROUND_TYPES_ALL = 'SELECT id, "rank" FROM round_types ORDER BY "rank"'

COUNTRIES_ALL = "SELECT id, continent_id FROM countries ORDER BY id"

EVENTS_ALL = "SELECT id FROM events ORDER BY id"
