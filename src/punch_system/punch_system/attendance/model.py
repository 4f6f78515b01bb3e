from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..core.enums import DutySessionStatus


@dataclass(frozen=True)
class DutySession:
    """Domain entity: one punch-on / punch-off period."""

    session_id: int
    user_id: int
    shift_date: str  # anchor date of the shift, YYYY-MM-DD
    local_date: str  # date of punch-on in the app zone
    punched_on_at: datetime
    status: DutySessionStatus
    team_id: Optional[int] = None
    shift_preset_id: Optional[int] = None
    shift_preset_segment_id: Optional[int] = None
    scheduled_start_local: Optional[str] = None
    scheduled_end_local: Optional[str] = None
    punched_off_at: Optional[datetime] = None
    is_late: bool = False
    late_minutes: int = 0
    overtime_minutes: int = 0
    note: Optional[str] = None

    def worked_minutes(self, *, until: Optional[datetime] = None) -> int:
        """Minutes on duty; open sessions count up to ``until`` when given."""

        end = self.punched_off_at or until
        if end is None:
            return 0
        return max(0, minutes_between(self.punched_on_at, end))


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    month: str  # YYYY-MM
    total_worked_minutes: int
    total_late_minutes: int
    total_overtime_minutes: int
    session_count: int
