from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..attendance.repository import DutySessionRepository
from ..audit.model import AuditEvent
from ..audit.repository import AuditRepository
from ..breaks.repository import BreakRepository
from ..common.datetime_utils import month_bounds
from ..core.exceptions import ValidationError
from .model import MonthlyReport, MonthlyReportSummary
from .repository import MonthlyReportRepository

logger = logging.getLogger(__name__)


def report_scope_key(year: int, month: int, team_id: Optional[int] = None) -> str:
    return f"{year}-{month:02d}:{team_id or 'global'}"


class ReportService:
    """Monthly attendance snapshots, generated once per scope."""

    def __init__(
        self,
        reports: MonthlyReportRepository,
        sessions: DutySessionRepository,
        breaks: BreakRepository,
        audit: AuditRepository,
    ):
        self._reports = reports
        self._sessions = sessions
        self._breaks = breaks
        self._audit = audit

    def list_reports(self) -> Sequence[MonthlyReport]:
        return self._reports.list_reports()

    def generate_monthly_report(
        self,
        year: int,
        month: int,
        *,
        team_id: Optional[int] = None,
        actor_id: Optional[int] = None,
    ) -> MonthlyReport:
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        if int(year) < 2000:
            raise ValidationError("year must be 2000 or later")

        scope_key = report_scope_key(year, month, team_id)
        existing = self._reports.get_by_scope_key(scope_key)
        if existing:
            return existing

        local_date_from, local_date_to = month_bounds(year, month)
        sessions = self._sessions.list_closed(
            local_date_from=local_date_from, local_date_to=local_date_to, team_id=team_id
        )
        breaks = self._breaks.list_finished(
            local_date_from=local_date_from, local_date_to=local_date_to, team_id=team_id
        )

        employee_ids = {s.user_id for s in sessions} | {b.user_id for b in breaks}
        summary = MonthlyReportSummary(
            local_date_from=local_date_from,
            local_date_to=local_date_to,
            employees_count=len(employee_ids),
            duty_sessions_count=len(sessions),
            break_sessions_count=len(breaks),
            overtime_break_count=sum(1 for b in breaks if b.is_overtime),
            worked_minutes=sum(s.worked_minutes() for s in sessions),
            break_minutes=sum(b.actual_minutes or 0 for b in breaks),
            late_minutes=sum(s.late_minutes for s in sessions),
        )

        created = self._reports.create(
            scope_key=scope_key,
            year=int(year),
            month=int(month),
            team_id=team_id,
            summary=summary,
            generated_by=actor_id,
        )
        logger.info("monthly report generated scope=%s employees=%d", scope_key, summary.employees_count)

        self._audit.record(
            AuditEvent(
                actor_user_id=actor_id,
                action="MONTHLY_REPORT_GENERATED",
                entity_type="MonthlyReport",
                entity_id=created.report_id,
                payload=summary.to_payload(),
            )
        )
        return created
