from __future__ import annotations

import math
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional

from . import constants


def positive_number(value: Any, fallback: float) -> float:
    """Return ``value`` as a number when it is finite and > 0, else ``fallback``.

    Settings modules read raw environment strings; an empty, malformed or
    non-positive value keeps the default instead of failing startup.
    """

    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    if math.isfinite(parsed) and parsed > 0:
        return parsed
    return fallback


@dataclass(frozen=True)
class AppSettings:
    app_timezone: str = constants.DEFAULT_TIMEZONE
    max_client_past_hours: float = constants.DEFAULT_MAX_CLIENT_PAST_HOURS
    max_client_future_minutes: float = constants.DEFAULT_MAX_CLIENT_FUTURE_MINUTES
    high_trust_skew_minutes: float = constants.DEFAULT_HIGH_TRUST_SKEW_MINUTES
    max_late_minutes: int = constants.DEFAULT_MAX_LATE_MINUTES
    max_overtime_minutes: int = constants.DEFAULT_MAX_OVERTIME_MINUTES
    default_late_grace_minutes: int = constants.DEFAULT_LATE_GRACE_MINUTES
    break_grace_minutes: int = constants.DEFAULT_BREAK_GRACE_MINUTES
    max_active_duty_hours: float = constants.DEFAULT_MAX_ACTIVE_DUTY_HOURS
    system_job_user_id: Optional[int] = None
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_module(cls, settings: ModuleType) -> "AppSettings":
        def num(name: str, fallback: float) -> float:
            return positive_number(getattr(settings, name, None), fallback)

        return cls(
            app_timezone=str(getattr(settings, "APP_TIMEZONE", None) or constants.DEFAULT_TIMEZONE),
            max_client_past_hours=num("MAX_CLIENT_PAST_HOURS", constants.DEFAULT_MAX_CLIENT_PAST_HOURS),
            max_client_future_minutes=num("MAX_CLIENT_FUTURE_MINUTES", constants.DEFAULT_MAX_CLIENT_FUTURE_MINUTES),
            high_trust_skew_minutes=num("HIGH_TRUST_SKEW_MINUTES", constants.DEFAULT_HIGH_TRUST_SKEW_MINUTES),
            max_late_minutes=int(num("MAX_LATE_MINUTES", constants.DEFAULT_MAX_LATE_MINUTES)),
            max_overtime_minutes=int(num("MAX_OVERTIME_MINUTES", constants.DEFAULT_MAX_OVERTIME_MINUTES)),
            # Zero grace is a legitimate setting, so it is not run through positive_number.
            default_late_grace_minutes=int(getattr(settings, "DEFAULT_LATE_GRACE_MINUTES", constants.DEFAULT_LATE_GRACE_MINUTES)),
            break_grace_minutes=int(num("BREAK_GRACE_MINUTES", constants.DEFAULT_BREAK_GRACE_MINUTES)),
            max_active_duty_hours=num("MAX_ACTIVE_DUTY_HOURS", constants.DEFAULT_MAX_ACTIVE_DUTY_HOURS),
            system_job_user_id=_optional_id(getattr(settings, "SYSTEM_JOB_USER_ID", None)),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
            debug=bool(getattr(settings, "DEBUG", False)),
        )


def _optional_id(value: Any) -> Optional[int]:
    text = str(value or "").strip()
    return int(text) if text.isdecimal() else None
