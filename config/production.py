import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("ATTENDANCE_API_URL", "https://api.example.com/api"),
    "timeout": float(os.getenv("ATTENDANCE_API_TIMEOUT", "10")),
    "token": os.getenv("ATTENDANCE_API_TOKEN"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_WORKING_HOURS = float(os.getenv("DEFAULT_WORKING_HOURS", "8"))
DAY_CELL_RECORD_CAP = int(os.getenv("DAY_CELL_RECORD_CAP", "2"))
PRESENT_DAY_POLICY = os.getenv("PRESENT_DAY_POLICY", "distinct_date")
