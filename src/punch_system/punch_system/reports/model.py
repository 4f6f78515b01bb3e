from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class MonthlyReportSummary:
    local_date_from: str
    local_date_to: str
    employees_count: int
    duty_sessions_count: int
    break_sessions_count: int
    overtime_break_count: int
    worked_minutes: int
    break_minutes: int
    late_minutes: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "period": {"localDateFrom": self.local_date_from, "localDateTo": self.local_date_to},
            "employeesCount": self.employees_count,
            "dutySessionsCount": self.duty_sessions_count,
            "breakSessionsCount": self.break_sessions_count,
            "overtimeBreakCount": self.overtime_break_count,
            "totals": {
                "workedMinutes": self.worked_minutes,
                "breakMinutes": self.break_minutes,
                "lateMinutes": self.late_minutes,
            },
        }


@dataclass(frozen=True)
class MonthlyReport:
    report_id: int
    scope_key: str  # YYYY-MM:<team id|global>
    year: int
    month: int
    summary: MonthlyReportSummary
    team_id: Optional[int] = None
    generated_by: Optional[int] = None
    generated_at: Optional[datetime] = None
