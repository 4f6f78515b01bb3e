from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from src.punch_system.punch_system.attendance.model import DutySession
from src.punch_system.punch_system.breaks.model import BreakPolicy, BreakSession
from src.punch_system.punch_system.breaks.service import (
    BREAK_END_BEFORE_BREAK_START_CLAMPED,
    BREAK_START_BEFORE_PUNCH_ON_CLAMPED,
    BreakService,
)
from src.punch_system.punch_system.core.enums import BreakSessionStatus, DutySessionStatus, Role
from src.punch_system.punch_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.punch_system.punch_system.users.model import Employee

DUBAI = "Asia/Dubai"


def dubai(year, month, day, hour, minute):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc) - timedelta(hours=4)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class FakeBreakRepo:
    def __init__(self, *policies):
        self.policies = {p.code: p for p in policies}
        self.breaks = {}
        self._next_id = 0

    def list_active_policies(self):
        return [p for p in self.policies.values() if p.is_active]

    def get_policy_by_code(self, code):
        return self.policies.get(code)

    def create_policy(self, *, code, name, expected_duration_minutes, daily_limit, is_active):
        policy = BreakPolicy(
            policy_id=len(self.policies) + 1,
            code=code,
            name=name,
            expected_duration_minutes=expected_duration_minutes,
            daily_limit=daily_limit,
            is_active=is_active,
        )
        self.policies[code] = policy
        return policy

    def get_active_for_user(self, user_id):
        for b in self.breaks.values():
            if b.user_id == user_id and b.status == BreakSessionStatus.ACTIVE:
                return b
        return None

    def count_for_policy_on_date(self, *, user_id, policy_id, local_date, statuses):
        return sum(
            1 for b in self.breaks.values()
            if b.user_id == user_id and b.policy_id == policy_id and b.local_date == local_date and b.status in statuses
        )

    def create(self, *, user_id, duty_session_id, policy, local_date, started_at):
        self._next_id += 1
        created = BreakSession(
            break_id=self._next_id,
            user_id=user_id,
            duty_session_id=duty_session_id,
            policy_id=policy.policy_id,
            policy_code=policy.code,
            local_date=local_date,
            started_at=started_at,
            expected_duration_minutes=policy.expected_duration_minutes,
            status=BreakSessionStatus.ACTIVE,
        )
        self.breaks[created.break_id] = created
        return created

    def finish(self, *, break_id, ended_at, actual_minutes, is_overtime, status):
        updated = replace(
            self.breaks[break_id],
            ended_at=ended_at,
            actual_minutes=actual_minutes,
            is_overtime=is_overtime,
            status=status,
            auto_closed=status == BreakSessionStatus.AUTO_CLOSED,
        )
        self.breaks[break_id] = updated
        return updated

    def cancel(self, *, break_id, cancelled_at, cancelled_by):
        updated = replace(self.breaks[break_id], status=BreakSessionStatus.CANCELLED, cancelled_at=cancelled_at)
        self.breaks[break_id] = updated
        return updated


class FakeSessionRepo:
    def __init__(self, active=None):
        self.active = active

    def get_active_for_user(self, user_id):
        return self.active


class FakeAudit:
    def __init__(self):
        self.events = []

    def record(self, event):
        self.events.append(event)


LUNCH = BreakPolicy(policy_id=1, code="lunch", name="Lunch", expected_duration_minutes=30, daily_limit=1)
SMOKE = BreakPolicy(policy_id=2, code="smoke", name="Smoke", expected_duration_minutes=5, daily_limit=3, is_active=False)
EMPLOYEE = Employee(user_id=7, display_name="Sara", username="sara")
DUTY = DutySession(
    session_id=11,
    user_id=7,
    shift_date="2025-03-01",
    local_date="2025-03-01",
    punched_on_at=dubai(2025, 3, 1, 8, 0),
    status=DutySessionStatus.ACTIVE,
)


def build(*, duty=DUTY, now=None):
    clock = Clock(now or dubai(2025, 3, 1, 12, 0))
    breaks = FakeBreakRepo(LUNCH, SMOKE)
    audit = FakeAudit()
    svc = BreakService(breaks, FakeSessionRepo(duty), audit, app_timezone=DUBAI, clock=clock)
    return svc, breaks, audit, clock


def test_create_policy_requires_admin():
    svc, _, _, _ = build()

    with pytest.raises(AuthorizationError):
        svc.create_policy(
            current_role=Role.EMPLOYEE, code="tea", name="Tea", expected_duration_minutes=10, daily_limit=2
        )


def test_create_policy_normalizes_code_and_checks_limits():
    svc, _, _, _ = build()

    policy = svc.create_policy(
        current_role=Role.ADMIN, code=" Tea ", name="Tea", expected_duration_minutes=10, daily_limit=2
    )

    assert policy.code == "tea"
    with pytest.raises(ValidationError):
        svc.create_policy(current_role=Role.ADMIN, code="x", name="X", expected_duration_minutes=0, daily_limit=1)


def test_start_break_requires_active_policy():
    svc, _, _, _ = build()

    with pytest.raises(NotFoundError):
        svc.start_break(EMPLOYEE, "smoke")
    with pytest.raises(NotFoundError):
        svc.start_break(EMPLOYEE, "nap")


def test_start_break_requires_duty():
    svc, _, _, _ = build(duty=None)

    with pytest.raises(ValidationError):
        svc.start_break(EMPLOYEE, "lunch")


def test_start_break_and_end_break():
    svc, _, audit, clock = build()

    started = svc.start_break(EMPLOYEE, "LUNCH")
    clock.now = dubai(2025, 3, 1, 12, 40)
    ended = svc.end_break(EMPLOYEE)

    assert started.local_date == "2025-03-01"
    assert started.duty_session_id == DUTY.session_id
    assert ended.status == BreakSessionStatus.COMPLETED
    assert ended.actual_minutes == 40
    assert ended.is_overtime
    assert [e.action for e in audit.events] == ["BREAK_START", "BREAK_END"]
    assert audit.events[0].payload["usedCountAfter"] == 1


def test_only_one_active_break():
    svc, _, _, _ = build()
    svc.start_break(EMPLOYEE, "lunch")

    with pytest.raises(ValidationError):
        svc.start_break(EMPLOYEE, "lunch")


def test_daily_limit_is_enforced_but_cancelled_breaks_do_not_count():
    svc, _, _, clock = build()

    svc.start_break(EMPLOYEE, "lunch")
    svc.cancel_break(EMPLOYEE)
    svc.start_break(EMPLOYEE, "lunch")
    clock.now = dubai(2025, 3, 1, 12, 20)
    svc.end_break(EMPLOYEE)

    with pytest.raises(ValidationError, match="Daily limit reached"):
        svc.start_break(EMPLOYEE, "lunch")


def test_break_start_before_punch_on_is_clamped():
    svc, _, audit, _ = build()

    started = svc.start_break(EMPLOYEE, "lunch", client_timestamp=dubai(2025, 3, 1, 7, 0).isoformat())

    assert started.started_at == DUTY.punched_on_at
    assert audit.events[-1].payload["time"]["anomaly"] == BREAK_START_BEFORE_PUNCH_ON_CLAMPED


def test_break_end_before_start_is_clamped():
    svc, _, audit, clock = build()
    started = svc.start_break(EMPLOYEE, "lunch")
    clock.now = dubai(2025, 3, 1, 12, 30)

    ended = svc.end_break(EMPLOYEE, client_timestamp=dubai(2025, 3, 1, 11, 0).isoformat())

    assert ended.ended_at == started.started_at
    assert ended.actual_minutes == 0
    assert not ended.is_overtime
    assert audit.events[-1].payload["time"]["anomaly"] == BREAK_END_BEFORE_BREAK_START_CLAMPED


def test_end_or_cancel_without_active_break():
    svc, _, _, _ = build()

    with pytest.raises(NotFoundError):
        svc.end_break(EMPLOYEE)
    with pytest.raises(NotFoundError):
        svc.cancel_break(EMPLOYEE)
