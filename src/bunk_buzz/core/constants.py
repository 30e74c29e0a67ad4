"""Defaults and limits used across services (schema.sql repeats the column defaults)."""

DEFAULT_MINIMUM_ATTENDANCE = 75.0
DEFAULT_SUBJECT_COLOR = "#8B5CF6"
MAX_SIMULATED_BUNKS = 50

DEFAULT_HISTORY_LIMIT = 30
RECENT_ACTIVITY_DAYS = 7

VERIFICATION_TOKEN_HOURS = 24
MIN_PASSWORD_LENGTH = 6
GOOGLE_DEFAULT_COLLEGE = "Not specified"
