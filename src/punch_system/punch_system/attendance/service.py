from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..audit.model import AuditEvent
from ..audit.repository import AuditRepository, record_quietly
from ..common.datetime_utils import date_in_zone, month_bounds, time_parts_in_zone, utc_now
from ..common.event_time import ClientTimestamp, EventTimeOptions, resolve_event_time
from ..core import constants
from ..core.exceptions import NotFoundError, ValidationError
from ..shifts.service import ShiftService
from ..users.model import Employee, Team
from ..users.repository import TeamRepository
from .factory import AttendanceStrategyFactory
from .model import DutySession, MonthlyAttendanceSummary
from .repository import DutySessionRepository

logger = logging.getLogger(__name__)

PUNCH_OFF_BEFORE_PUNCH_ON_CLAMPED = "PUNCH_OFF_BEFORE_PUNCH_ON_CLAMPED"


@dataclass(frozen=True)
class PunchOffResult:
    session: DutySession
    worked_minutes: int


class AttendanceService:
    def __init__(
        self,
        sessions: DutySessionRepository,
        shifts: ShiftService,
        teams: TeamRepository,
        audit: AuditRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        event_time_options: EventTimeOptions | None = None,
        app_timezone: str = constants.DEFAULT_TIMEZONE,
        max_late_minutes: int = constants.DEFAULT_MAX_LATE_MINUTES,
        max_overtime_minutes: int = constants.DEFAULT_MAX_OVERTIME_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._sessions = sessions
        self._shifts = shifts
        self._teams = teams
        self._audit = audit
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._event_time_options = event_time_options or EventTimeOptions()
        self._app_timezone = app_timezone
        self._max_late = int(max_late_minutes)
        self._max_overtime = int(max_overtime_minutes)
        self._clock = clock

    def punch_on(
        self,
        employee: Employee,
        *,
        note: Optional[str] = None,
        client_timestamp: ClientTimestamp = None,
    ) -> DutySession:
        event_time = resolve_event_time(
            client_timestamp, server_received_at=self._clock(), options=self._event_time_options
        )
        now = event_time.effective_at

        if self._sessions.get_active_for_user(employee.user_id):
            raise ValidationError("Already punched ON")

        resolved = self._shifts.get_segment_for_punch(employee, now)
        timezone = resolved.timezone if resolved else self._app_timezone
        segment = resolved.segment if resolved else None
        team = self._team_for(employee) if resolved is None else None

        strategy = self._factory.for_punch_on(segment=segment, team=team)
        decision = strategy.decide_punch_on(
            now=now, timezone=timezone, segment=segment, team=team, max_late_minutes=self._max_late
        )

        local_date = date_in_zone(now, timezone)
        created = self._sessions.create(
            user_id=employee.user_id,
            team_id=employee.team_id,
            shift_preset_id=resolved.preset.preset_id if resolved else None,
            shift_preset_segment_id=segment.segment_id if segment else None,
            shift_date=segment.shift_date if segment else local_date,
            local_date=local_date,
            scheduled_start_local=segment.schedule_start_local if segment else None,
            scheduled_end_local=segment.schedule_end_local if segment else None,
            punched_on_at=now,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            note=note,
        )
        logger.info(
            "punch on user=%s session=%s shift_date=%s late=%s anomaly=%s",
            employee.user_id, created.session_id, created.shift_date, decision.late_minutes, event_time.anomaly,
        )

        record_quietly(
            self._audit,
            AuditEvent(
                actor_user_id=employee.user_id,
                action="DUTY_PUNCH_ON",
                entity_type="DutySession",
                entity_id=created.session_id,
                payload={
                    "shiftDate": created.shift_date,
                    "isLate": decision.is_late,
                    "lateMinutes": decision.late_minutes,
                    "shiftPresetId": created.shift_preset_id,
                    "shiftPresetSegmentId": created.shift_preset_segment_id,
                    "scheduledStartLocal": created.scheduled_start_local,
                    "scheduledEndLocal": created.scheduled_end_local,
                    "clientTimestamp": _client_value(client_timestamp),
                    "time": event_time.to_payload(),
                },
            ),
        )
        return created

    def punch_off(
        self,
        employee: Employee,
        *,
        note: Optional[str] = None,
        client_timestamp: ClientTimestamp = None,
    ) -> PunchOffResult:
        active = self._sessions.get_active_for_user(employee.user_id)
        if active is None:
            # An offline punch-off may arrive after the stale-session job closed
            # the session; let it correct that record with the real time.
            last_closed = self._sessions.get_last_closed_for_user(employee.user_id)
            if last_closed and last_closed.note and constants.AUTO_CLOSED_STALE_SESSION in last_closed.note:
                active = last_closed
        if active is None:
            raise NotFoundError("No active duty session found")

        event_time = resolve_event_time(
            client_timestamp, server_received_at=self._clock(), options=self._event_time_options
        ).clamp_not_before(active.punched_on_at, PUNCH_OFF_BEFORE_PUNCH_ON_CLAMPED)
        now = event_time.effective_at

        team = self._team_for(employee)
        strategy = self._factory.for_punch_off(session=active, team=team)
        overtime = strategy.overtime_minutes(
            session=active,
            punched_off_at=now,
            timezone=self._app_timezone,
            team=team,
            max_overtime_minutes=self._max_overtime,
        )

        updated = self._sessions.close(
            session_id=active.session_id,
            punched_off_at=now,
            overtime_minutes=overtime,
            note=note or active.note,
        )
        worked = updated.worked_minutes()
        logger.info(
            "punch off user=%s session=%s worked=%s overtime=%s anomaly=%s",
            employee.user_id, updated.session_id, worked, overtime, event_time.anomaly,
        )

        record_quietly(
            self._audit,
            AuditEvent(
                actor_user_id=employee.user_id,
                action="DUTY_PUNCH_OFF",
                entity_type="DutySession",
                entity_id=updated.session_id,
                payload={
                    "workedMinutes": worked,
                    "overtimeMinutes": overtime,
                    "clientTimestamp": _client_value(client_timestamp),
                    "time": event_time.to_payload(),
                },
            ),
        )
        return PunchOffResult(session=updated, worked_minutes=worked)

    def monthly_summary(self, user_id: int) -> MonthlyAttendanceSummary:
        """Totals for the current local month; open sessions count elapsed time."""

        now = self._clock()
        parts = time_parts_in_zone(now, self._app_timezone)
        first, last = month_bounds(parts.year, parts.month)
        sessions = self._sessions.list_for_user(user_id=user_id, local_date_from=first, local_date_to=last)

        return MonthlyAttendanceSummary(
            month=first[:7],
            total_worked_minutes=sum(s.worked_minutes(until=now) for s in sessions),
            total_late_minutes=sum(s.late_minutes for s in sessions),
            total_overtime_minutes=sum(s.overtime_minutes for s in sessions),
            session_count=len(sessions),
        )

    def _team_for(self, employee: Employee) -> Optional[Team]:
        if not employee.team_id:
            return None
        return self._teams.get_by_id(employee.team_id)


def _client_value(client_timestamp: ClientTimestamp) -> Optional[str]:
    if not client_timestamp:
        return None
    if isinstance(client_timestamp, datetime):
        return client_timestamp.isoformat()
    return str(client_timestamp)
