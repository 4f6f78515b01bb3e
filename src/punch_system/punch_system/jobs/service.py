from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..attendance.repository import DutySessionRepository
from ..audit.model import AuditEvent
from ..audit.repository import AuditRepository
from ..breaks.repository import BreakRepository
from ..common.datetime_utils import minutes_between, time_parts_in_zone, to_iso_z, utc_now
from ..core import constants
from ..core.enums import BreakSessionStatus
from ..reports.service import ReportService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoCloseResult:
    checked: int
    auto_closed: int


@dataclass(frozen=True)
class StaleDutyResult:
    checked: int
    auto_closed: int
    max_hours: float


@dataclass(frozen=True)
class MonthlySnapshotResult:
    generated: bool
    reason: Optional[str] = None
    report_id: Optional[int] = None
    year: Optional[int] = None
    month: Optional[int] = None


@dataclass(frozen=True)
class DailyJobsResult:
    auto_close: AutoCloseResult
    stale_duty: StaleDutyResult
    monthly: MonthlySnapshotResult


def stale_session_note(note: Optional[str]) -> str:
    if note:
        return f"{note} | {constants.AUTO_CLOSED_STALE_SESSION}"
    return constants.AUTO_CLOSED_STALE_SESSION


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


class JobsService:
    """Maintenance work run by an external scheduler once a day."""

    def __init__(
        self,
        sessions: DutySessionRepository,
        breaks: BreakRepository,
        reports: ReportService,
        audit: AuditRepository,
        *,
        app_timezone: str = constants.DEFAULT_TIMEZONE,
        break_grace_minutes: int = constants.DEFAULT_BREAK_GRACE_MINUTES,
        max_active_duty_hours: float = constants.DEFAULT_MAX_ACTIVE_DUTY_HOURS,
        job_actor_id: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._sessions = sessions
        self._breaks = breaks
        self._reports = reports
        self._audit = audit
        self._app_timezone = app_timezone
        self._break_grace = int(break_grace_minutes)
        self._max_hours = max_active_duty_hours
        self._job_actor_id = job_actor_id
        self._clock = clock

    def run_daily(self) -> DailyJobsResult:
        result = DailyJobsResult(
            auto_close=self.auto_close_overtime_breaks(),
            stale_duty=self.auto_close_stale_duty_sessions(),
            monthly=self.generate_previous_month_report_if_first_day(),
        )
        logger.info(
            "daily jobs done breaks_closed=%d duty_closed=%d monthly=%s",
            result.auto_close.auto_closed, result.stale_duty.auto_closed, result.monthly.generated,
        )
        return result

    def auto_close_overtime_breaks(self) -> AutoCloseResult:
        """Close ACTIVE breaks running past their expected length plus grace."""

        now = self._clock()
        active = self._breaks.list_active()
        closed = 0

        for brk in active:
            elapsed = max(0, minutes_between(brk.started_at, now))
            if elapsed <= brk.expected_duration_minutes + self._break_grace:
                continue

            self._breaks.finish(
                break_id=brk.break_id,
                ended_at=now,
                actual_minutes=elapsed,
                is_overtime=True,
                status=BreakSessionStatus.AUTO_CLOSED,
            )
            self._audit.record(
                AuditEvent(
                    actor_user_id=brk.user_id,
                    action="BREAK_AUTO_CLOSE",
                    entity_type="BreakSession",
                    entity_id=brk.break_id,
                    payload={
                        "code": brk.policy_code,
                        "expectedDuration": brk.expected_duration_minutes,
                        "actualMinutes": elapsed,
                        "graceMinutes": self._break_grace,
                    },
                )
            )
            closed += 1

        return AutoCloseResult(checked=len(active), auto_closed=closed)

    def auto_close_stale_duty_sessions(self) -> StaleDutyResult:
        """Close duty sessions left ACTIVE longer than the allowed maximum.

        The punch-off is set to punch-on plus the maximum, not to now, and the
        note is tagged so a late offline punch-off can still correct it.
        """

        max_span = timedelta(hours=self._max_hours)
        cutoff = self._clock() - max_span
        stale = self._sessions.list_active_started_before(cutoff)

        for session in stale:
            punched_off_at = session.punched_on_at + max_span
            self._sessions.auto_close(
                session_id=session.session_id,
                punched_off_at=punched_off_at,
                note=stale_session_note(session.note),
            )
            self._audit.record(
                AuditEvent(
                    actor_user_id=session.user_id,
                    action="DUTY_AUTO_CLOSE_STALE",
                    entity_type="DutySession",
                    entity_id=session.session_id,
                    payload={
                        "maxHours": self._max_hours,
                        "cutoff": to_iso_z(cutoff),
                        "autoPunchedOffAt": to_iso_z(punched_off_at),
                    },
                )
            )
            logger.warning("stale duty session auto-closed session=%s user=%s", session.session_id, session.user_id)

        return StaleDutyResult(checked=len(stale), auto_closed=len(stale), max_hours=self._max_hours)

    def generate_previous_month_report_if_first_day(
        self, *, force: bool = False, team_id: Optional[int] = None
    ) -> MonthlySnapshotResult:
        parts = time_parts_in_zone(self._clock(), self._app_timezone)
        if not force and parts.day != 1:
            return MonthlySnapshotResult(generated=False, reason="Not first day of month")

        year, month = previous_month(parts.year, parts.month)
        report = self._reports.generate_monthly_report(year, month, team_id=team_id, actor_id=self._job_actor_id)
        return MonthlySnapshotResult(generated=True, report_id=report.report_id, year=year, month=month)

    def generate_monthly_snapshot(
        self,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        team_id: Optional[int] = None,
        force: bool = False,
    ) -> MonthlySnapshotResult:
        """Snapshot an explicit month, or fall back to the first-day rule."""

        if year and month:
            report = self._reports.generate_monthly_report(year, month, team_id=team_id, actor_id=self._job_actor_id)
            return MonthlySnapshotResult(generated=True, report_id=report.report_id, year=year, month=month)
        return self.generate_previous_month_report_if_first_day(force=force, team_id=team_id)
