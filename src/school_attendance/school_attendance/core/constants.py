"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 100
DEFAULT_CHART_DAYS = 30
MAX_CHART_DAYS = 3650
DASHBOARD_RECENT_DAYS = 7
DASHBOARD_RECENT_LIMIT = 10

CLASS_NAME_MAX_LENGTH = 50
MIN_GRADE = 1
MAX_GRADE = 12
STUDENT_NAME_MIN_LENGTH = 2
STUDENT_NAME_MAX_LENGTH = 100

DEFAULT_SCHOOL_NAME = "Sunshine Elementary School"
DAYS_PER_YEAR = 365.25

# Export periods -> number of calendar months back from today.
EXPORT_PERIOD_MONTHS = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "semester": 6,
    "1year": 12,
}
DEFAULT_EXPORT_PERIOD = "1month"

ATTENDANCE_COLUMN_MAX_WIDTH = 50
STUDENT_COLUMN_MAX_WIDTH = 30
