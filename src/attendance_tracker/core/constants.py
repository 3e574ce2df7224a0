"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Check-ins at or after this local hour are classified as late.
LATE_CUTOFF_HOUR = 9

HOURS_PRECISION = 2
RECENT_DAYS_WINDOW = 7
DEFAULT_EXPORT_FETCH_SIZE = 500

UNKNOWN_DEPARTMENT = "Unknown"
DATE_FORMAT = "%Y-%m-%d"
