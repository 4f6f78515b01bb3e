import os

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Dubai")

MAX_CLIENT_PAST_HOURS = os.getenv("MAX_CLIENT_PAST_HOURS", "72")
MAX_CLIENT_FUTURE_MINUTES = os.getenv("MAX_CLIENT_FUTURE_MINUTES", "2")
HIGH_TRUST_SKEW_MINUTES = os.getenv("HIGH_TRUST_SKEW_MINUTES", "2")

MAX_LATE_MINUTES = os.getenv("MAX_LATE_MINUTES", "720")
MAX_OVERTIME_MINUTES = os.getenv("MAX_OVERTIME_MINUTES", "720")
DEFAULT_LATE_GRACE_MINUTES = int(os.getenv("DEFAULT_LATE_GRACE_MINUTES", "10"))

BREAK_GRACE_MINUTES = os.getenv("BREAK_GRACE_MINUTES", "5")
MAX_ACTIVE_DUTY_HOURS = os.getenv("MAX_ACTIVE_DUTY_HOURS", "20")
# Audit actor for scheduled jobs; empty means system (no actor)
SYSTEM_JOB_USER_ID = os.getenv("SYSTEM_JOB_USER_ID", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False
