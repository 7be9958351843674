import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("ATTENDANCE_API_URL", "http://localhost:5000/api"),
    "timeout": float(os.getenv("ATTENDANCE_API_TIMEOUT", "10")),
    "token": os.getenv("ATTENDANCE_API_TOKEN"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Hours pre-filled when a worker is marked present
DEFAULT_WORKING_HOURS = float(os.getenv("DEFAULT_WORKING_HOURS", "8"))
# Records shown per calendar cell before "+N more"
DAY_CELL_RECORD_CAP = int(os.getenv("DAY_CELL_RECORD_CAP", "2"))
# distinct_date | per_record
PRESENT_DAY_POLICY = os.getenv("PRESENT_DAY_POLICY", "distinct_date")
