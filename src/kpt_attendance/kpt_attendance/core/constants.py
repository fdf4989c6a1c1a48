"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SEMESTERS = (1, 2, 3, 4, 5, 6, 7, 8)

# Diploma programme: students past this semester are archived on promotion.
TERMINAL_SEMESTER = 6

# Percentage at or below which a student is in shortage.
ELIGIBILITY_THRESHOLD = 75.0

AUDIT_LOG_LIMIT = 100
RECENT_RECORDS_LIMIT = 5

# datetime.weekday(): Monday=0 ... Sunday=6
NON_OPERATING_WEEKDAY = 6

DEFAULT_SECTION = "A"
ROLL_NUMBER_SUFFIX_LENGTH = 5
