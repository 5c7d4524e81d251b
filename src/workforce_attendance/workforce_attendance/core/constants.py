"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NOT_MARKED_LABEL = "Not Marked"
EXPORT_COLUMNS = ("Employee", "Date", "Status", "In Time", "Out Time")
EXPORT_TIME_FORMAT = "%H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
DEFAULT_DB_TIMEOUT_SECONDS = 10
DEFAULT_TOP_ATTENDANCE_LIMIT = 5
