import os

APP_TIMEZONE = "Asia/Dubai"

MAX_CLIENT_PAST_HOURS = "72"
MAX_CLIENT_FUTURE_MINUTES = "2"
HIGH_TRUST_SKEW_MINUTES = "2"

MAX_LATE_MINUTES = "720"
MAX_OVERTIME_MINUTES = "720"
DEFAULT_LATE_GRACE_MINUTES = 10

BREAK_GRACE_MINUTES = "5"
MAX_ACTIVE_DUTY_HOURS = "20"
SYSTEM_JOB_USER_ID = ""

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
DEBUG = False
TESTING = True
