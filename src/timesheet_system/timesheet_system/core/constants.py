"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_OVERTIME_THRESHOLD_MINUTES = 40 * 60
MAX_SESSION_MINUTES = 24 * 60
DEFAULT_TIMEZONE = "UTC"
ENTRY_KEY_SEPARATOR = "_"
EXPORT_EMPTY_STATE = "No time entries for this period"
NOT_AVAILABLE = "N/A"
