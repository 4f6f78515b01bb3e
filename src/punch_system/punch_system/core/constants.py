"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Dubai"

DEFAULT_MAX_CLIENT_PAST_HOURS = 72
DEFAULT_MAX_CLIENT_FUTURE_MINUTES = 2
DEFAULT_HIGH_TRUST_SKEW_MINUTES = 2

DEFAULT_LATE_GRACE_MINUTES = 10
DEFAULT_MAX_LATE_MINUTES = 720
DEFAULT_MAX_OVERTIME_MINUTES = 720

DEFAULT_BREAK_GRACE_MINUTES = 5
DEFAULT_MAX_ACTIVE_DUTY_HOURS = 20

AUTO_CLOSED_STALE_SESSION = "AUTO_CLOSED_STALE_SESSION"
