from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..attendance.repository import DutySessionRepository
from ..audit.model import AuditEvent
from ..audit.repository import AuditRepository
from ..common.datetime_utils import date_in_zone, minutes_between, utc_now
from ..common.event_time import ClientTimestamp, EventTimeOptions, resolve_event_time
from ..common.validators import require_admin, require_min_value, require_non_empty
from ..core import constants
from ..core.enums import BreakSessionStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Employee
from .model import BreakPolicy, BreakSession
from .repository import BreakRepository

logger = logging.getLogger(__name__)

BREAK_START_BEFORE_PUNCH_ON_CLAMPED = "BREAK_START_BEFORE_PUNCH_ON_CLAMPED"
BREAK_END_BEFORE_BREAK_START_CLAMPED = "BREAK_END_BEFORE_BREAK_START_CLAMPED"

# Cancelled breaks do not use up the daily allowance.
COUNTED_STATUSES = (BreakSessionStatus.ACTIVE, BreakSessionStatus.COMPLETED, BreakSessionStatus.AUTO_CLOSED)


class BreakService:
    def __init__(
        self,
        breaks: BreakRepository,
        sessions: DutySessionRepository,
        audit: AuditRepository,
        *,
        event_time_options: EventTimeOptions | None = None,
        app_timezone: str = constants.DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._breaks = breaks
        self._sessions = sessions
        self._audit = audit
        self._event_time_options = event_time_options or EventTimeOptions()
        self._app_timezone = app_timezone
        self._clock = clock

    def list_policies(self) -> Sequence[BreakPolicy]:
        return self._breaks.list_active_policies()

    def create_policy(
        self,
        *,
        current_role: Role,
        code: str,
        name: str,
        expected_duration_minutes: int,
        daily_limit: int,
        is_active: bool = True,
    ) -> BreakPolicy:
        require_admin(current_role)
        code = require_non_empty(code, "code").lower()
        name = require_non_empty(name, "name")
        require_min_value(expected_duration_minutes, "expected_duration_minutes", 1)
        require_min_value(daily_limit, "daily_limit", 1)

        return self._breaks.create_policy(
            code=code,
            name=name,
            expected_duration_minutes=int(expected_duration_minutes),
            daily_limit=int(daily_limit),
            is_active=bool(is_active),
        )

    def start_break(self, employee: Employee, code: str, *, client_timestamp: ClientTimestamp = None) -> BreakSession:
        policy = self._breaks.get_policy_by_code((code or "").strip().lower())
        if not policy or not policy.is_active:
            raise NotFoundError("Break policy not found")

        duty = self._sessions.get_active_for_user(employee.user_id)
        if not duty:
            raise ValidationError("Cannot start break without active duty session")

        if self._breaks.get_active_for_user(employee.user_id):
            raise ValidationError("You already have an active break")

        event_time = resolve_event_time(
            client_timestamp, server_received_at=self._clock(), options=self._event_time_options
        ).clamp_not_before(duty.punched_on_at, BREAK_START_BEFORE_PUNCH_ON_CLAMPED)
        started_at = event_time.effective_at
        local_date = date_in_zone(started_at, self._app_timezone)

        used = self._breaks.count_for_policy_on_date(
            user_id=employee.user_id, policy_id=policy.policy_id, local_date=local_date, statuses=COUNTED_STATUSES
        )
        if used >= policy.daily_limit:
            raise ValidationError(f"Daily limit reached for {policy.code}. Limit: {policy.daily_limit}")

        created = self._breaks.create(
            user_id=employee.user_id,
            duty_session_id=duty.session_id,
            policy=policy,
            local_date=local_date,
            started_at=started_at,
        )
        logger.info("break start user=%s code=%s used=%d/%d", employee.user_id, policy.code, used + 1, policy.daily_limit)

        self._audit.record(
            AuditEvent(
                actor_user_id=employee.user_id,
                action="BREAK_START",
                entity_type="BreakSession",
                entity_id=created.break_id,
                payload={
                    "code": policy.code,
                    "localDate": local_date,
                    "usedCountAfter": used + 1,
                    "dailyLimit": policy.daily_limit,
                    "time": event_time.to_payload(),
                },
            )
        )
        return created

    def end_break(self, employee: Employee, *, client_timestamp: ClientTimestamp = None) -> BreakSession:
        active = self._breaks.get_active_for_user(employee.user_id)
        if not active:
            raise NotFoundError("No active break found")

        event_time = resolve_event_time(
            client_timestamp, server_received_at=self._clock(), options=self._event_time_options
        ).clamp_not_before(active.started_at, BREAK_END_BEFORE_BREAK_START_CLAMPED)
        ended_at = event_time.effective_at

        actual = max(0, minutes_between(active.started_at, ended_at))
        is_overtime = actual > active.expected_duration_minutes

        updated = self._breaks.finish(
            break_id=active.break_id,
            ended_at=ended_at,
            actual_minutes=actual,
            is_overtime=is_overtime,
            status=BreakSessionStatus.COMPLETED,
        )

        self._audit.record(
            AuditEvent(
                actor_user_id=employee.user_id,
                action="BREAK_END",
                entity_type="BreakSession",
                entity_id=updated.break_id,
                payload={
                    "code": active.policy_code,
                    "actualMinutes": actual,
                    "expectedDuration": active.expected_duration_minutes,
                    "isOvertime": is_overtime,
                    "time": event_time.to_payload(),
                },
            )
        )
        return updated

    def cancel_break(self, employee: Employee) -> BreakSession:
        active = self._breaks.get_active_for_user(employee.user_id)
        if not active:
            raise NotFoundError("No active break to cancel")

        updated = self._breaks.cancel(break_id=active.break_id, cancelled_at=self._clock(), cancelled_by=employee.user_id)

        self._audit.record(
            AuditEvent(
                actor_user_id=employee.user_id,
                action="BREAK_CANCEL",
                entity_type="BreakSession",
                entity_id=updated.break_id,
                payload={"localDate": active.local_date},
            )
        )
        return updated
