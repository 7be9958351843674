import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("ATTENDANCE_API_URL", "http://api.test/api"),
    "timeout": 1.0,
    "token": None,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEFAULT_WORKING_HOURS = 8.0
DAY_CELL_RECORD_CAP = 2
PRESENT_DAY_POLICY = "distinct_date"
