"""Defaults shared by the validator, the calendar grid and the API layer."""

DEFAULT_WORKING_HOURS = 8.0
MAX_WORKING_HOURS = 24.0
DAY_CELL_RECORD_CAP = 2
DEFAULT_USER_PAGE_LIMIT = 1000
DEFAULT_API_TIMEOUT_SEC = 10.0
