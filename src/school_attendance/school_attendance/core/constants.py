"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ATTENDANCE_WINDOW_SECONDS = 60
DEFAULT_DAY_DURATION_SECONDS = 120
DEFAULT_RECENT_LIMIT = 15

# Trailing history inspected when counting an absence streak (inclusive of the reference day).
STREAK_WINDOW_DAYS = 5
# Streak length at which a parent notification is queued. Independent of STREAK_WINDOW_DAYS.
NOTIFICATION_THRESHOLD = 3

DAY_CYCLE_JOB_ID = "day-cycle"
ABSENCE_JOB_PREFIX = "absence"
