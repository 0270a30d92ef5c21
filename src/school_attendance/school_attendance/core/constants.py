"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
MISSING_LABEL = "—"

DEFAULT_API_TIMEOUT = 10
DEFAULT_FETCH_MAX_WORKERS = 8
DEFAULT_ROSTER_LIMIT = 500

GOOD_ATTENDANCE_THRESHOLD = 90
WARNING_ATTENDANCE_THRESHOLD = 75

DEFAULT_CACHE_TTL = 60
DEFAULT_CACHE_MAX_ENTRIES = 1024
