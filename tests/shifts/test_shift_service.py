from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from src.punch_system.punch_system.core.enums import AssignmentTargetType, Role
from src.punch_system.punch_system.core.exceptions import (
    AuthorizationError,
    InvalidTimeFormat,
    NotFoundError,
    ValidationError,
)
from src.punch_system.punch_system.shifts.model import ShiftAssignment, ShiftOverride, ShiftPreset
from src.punch_system.punch_system.shifts.service import NewShiftSegment, ShiftService
from src.punch_system.punch_system.users.model import Employee

DUBAI_OFFSET = timedelta(hours=4)


def dubai(year, month, day, hour, minute):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc) - DUBAI_OFFSET


class FakeShiftRepo:
    def __init__(self):
        self.presets = {}
        self.assignments = []
        self.overrides = []
        self._next_id = 1

    def _id(self):
        self._next_id += 1
        return self._next_id

    def add_preset(self, name, *, team_id=None, is_default=False, segments=()):
        preset = ShiftPreset(
            preset_id=self._id(), name=name, team_id=team_id, is_default=is_default, segments=tuple(segments)
        )
        self.presets[preset.preset_id] = preset
        return preset

    def get_preset(self, preset_id):
        return self.presets.get(preset_id)

    def list_presets(self):
        return [p for p in self.presets.values() if p.is_active]

    def create_preset(self, *, name, timezone, team_id, is_default, segments):
        stored = tuple(replace(s, segment_id=self._id()) for s in segments)
        preset = ShiftPreset(
            preset_id=self._id(),
            name=name,
            timezone=timezone,
            team_id=team_id,
            is_default=is_default,
            segments=stored,
        )
        self.presets[preset.preset_id] = preset
        return preset

    def get_default_preset(self, *, team_id):
        for p in self.presets.values():
            if p.is_default and p.is_active and p.team_id == team_id:
                return p
        return None

    def find_override(self, *, target_type, target_id, on_date):
        matches = [
            o for o in self.overrides
            if o.target_type == target_type and o.target_id == target_id and o.override_date == on_date
        ]
        return matches[-1] if matches else None

    def create_override(self, *, target_type, target_id, preset_id, override_date, reason=None):
        override = ShiftOverride(
            override_id=self._id(),
            target_type=target_type,
            target_id=target_id,
            preset_id=preset_id,
            override_date=override_date,
            reason=reason,
        )
        self.overrides.append(override)
        return override

    def find_assignment(self, *, target_type, target_id, on_date):
        matches = [
            a for a in self.assignments
            if a.is_active and a.target_type == target_type and a.target_id == target_id and a.covers(on_date)
        ]
        return max(matches, key=lambda a: a.effective_from) if matches else None

    def replace_assignment(self, *, target_type, target_id, preset_id, effective_from, effective_to):
        assignment = ShiftAssignment(
            assignment_id=self._id(),
            target_type=target_type,
            target_id=target_id,
            preset_id=preset_id,
            effective_from=effective_from,
            effective_to=effective_to,
        )
        self.assignments.append(assignment)
        return assignment


EMPLOYEE = Employee(user_id=7, display_name="Sara", username="sara", team_id=3)
MORNING = [NewShiftSegment(segment_no=1, start_time="08:00", end_time="16:00")]


def test_create_preset_requires_admin():
    svc = ShiftService(FakeShiftRepo())

    with pytest.raises(AuthorizationError):
        svc.create_preset(current_role=Role.EMPLOYEE, name="Day", segments=MORNING)


def test_create_preset_requires_segments():
    svc = ShiftService(FakeShiftRepo())

    with pytest.raises(ValidationError):
        svc.create_preset(current_role=Role.ADMIN, name="Day", segments=[])


def test_create_preset_normalizes_segments():
    svc = ShiftService(FakeShiftRepo(), app_timezone="Asia/Dubai", default_late_grace_minutes=10)

    preset = svc.create_preset(
        current_role=Role.ADMIN,
        name="  Split ",
        segments=[
            NewShiftSegment(segment_no=2, start_time="22:00", end_time="02:00"),
            NewShiftSegment(segment_no=1, start_time="08:00", end_time="12:00", late_grace_minutes=0),
        ],
    )

    first, second = preset.ordered_segments()
    assert preset.name == "Split"
    assert preset.timezone == "Asia/Dubai"
    assert (first.segment_no, first.crosses_midnight, first.late_grace_minutes) == (1, False, 0)
    assert (second.segment_no, second.crosses_midnight, second.late_grace_minutes) == (2, True, 10)


def test_create_preset_rejects_duplicate_segment_numbers():
    svc = ShiftService(FakeShiftRepo())

    with pytest.raises(ValidationError):
        svc.create_preset(
            current_role=Role.ADMIN,
            name="Dup",
            segments=[
                NewShiftSegment(segment_no=1, start_time="08:00", end_time="12:00"),
                NewShiftSegment(segment_no=1, start_time="13:00", end_time="17:00"),
            ],
        )


def test_create_preset_rejects_bad_time():
    svc = ShiftService(FakeShiftRepo())

    with pytest.raises(InvalidTimeFormat):
        svc.create_preset(
            current_role=Role.ADMIN,
            name="Bad",
            segments=[NewShiftSegment(segment_no=1, start_time="8am", end_time="12:00")],
        )


def test_create_assignment_rejects_inverted_range():
    repo = FakeShiftRepo()
    preset = repo.add_preset("Day", segments=[])
    svc = ShiftService(repo)

    with pytest.raises(ValidationError):
        svc.create_assignment(
            current_role=Role.ADMIN,
            target_type=AssignmentTargetType.USER,
            target_id=7,
            preset_id=preset.preset_id,
            effective_from="2025-03-10",
            effective_to="2025-03-01",
        )


def test_create_override_requires_existing_preset():
    svc = ShiftService(FakeShiftRepo())

    with pytest.raises(NotFoundError):
        svc.create_override(
            current_role=Role.ADMIN,
            target_type=AssignmentTargetType.USER,
            target_id=7,
            preset_id=999,
            override_date="2025-03-01",
        )


def test_resolution_precedence():
    repo = FakeShiftRepo()
    global_default = repo.add_preset("Global", is_default=True)
    team_default = repo.add_preset("Team default", team_id=3, is_default=True)
    team_assigned = repo.add_preset("Team assigned")
    user_assigned = repo.add_preset("User assigned")
    team_override = repo.add_preset("Team override")
    user_override = repo.add_preset("User override")
    svc = ShiftService(repo, app_timezone="Asia/Dubai")
    now = dubai(2025, 3, 1, 9, 0)
    day = date(2025, 3, 1)

    def resolved():
        return svc.resolve_preset_for_user(EMPLOYEE, now).name

    assert resolved() == team_default.name
    repo.presets.pop(team_default.preset_id)
    assert resolved() == global_default.name

    repo.replace_assignment(
        target_type=AssignmentTargetType.TEAM, target_id=3, preset_id=team_assigned.preset_id,
        effective_from=date(2025, 1, 1), effective_to=None,
    )
    assert resolved() == team_assigned.name

    repo.replace_assignment(
        target_type=AssignmentTargetType.USER, target_id=7, preset_id=user_assigned.preset_id,
        effective_from=date(2025, 1, 1), effective_to=date(2025, 12, 31),
    )
    assert resolved() == user_assigned.name

    repo.create_override(
        target_type=AssignmentTargetType.TEAM, target_id=3, preset_id=team_override.preset_id, override_date=day
    )
    assert resolved() == team_override.name

    repo.create_override(
        target_type=AssignmentTargetType.USER, target_id=7, preset_id=user_override.preset_id, override_date=day
    )
    assert resolved() == user_override.name


def test_resolution_uses_local_date_for_overrides():
    repo = FakeShiftRepo()
    repo.add_preset("Global", is_default=True)
    special = repo.add_preset("Special")
    repo.create_override(
        target_type=AssignmentTargetType.USER, target_id=7, preset_id=special.preset_id, override_date=date(2025, 3, 2)
    )
    svc = ShiftService(repo, app_timezone="Asia/Dubai")

    # 21:30 UTC on the 1st is already the 2nd in Dubai
    now = datetime(2025, 3, 1, 21, 30, tzinfo=timezone.utc)

    assert svc.resolve_preset_for_user(EMPLOYEE, now).name == "Special"


def test_segment_for_punch_falls_back_to_closest():
    repo = FakeShiftRepo()
    svc = ShiftService(repo, app_timezone="Asia/Dubai")
    svc.create_preset(current_role=Role.ADMIN, name="Day", segments=MORNING, is_default=True)

    result = svc.get_segment_for_punch(EMPLOYEE, dubai(2025, 3, 1, 7, 45))

    assert result is not None
    assert result.timezone == "Asia/Dubai"
    assert result.segment.schedule_start_local == "2025-03-01T08:00"


def test_active_segment_for_user_raises_outside_windows():
    repo = FakeShiftRepo()
    svc = ShiftService(repo, app_timezone="Asia/Dubai")
    svc.create_preset(current_role=Role.ADMIN, name="Day", segments=MORNING, is_default=True)

    assert svc.get_active_segment_for_user(EMPLOYEE, dubai(2025, 3, 1, 9, 0)).segment.segment_no == 1
    with pytest.raises(NotFoundError):
        svc.get_active_segment_for_user(EMPLOYEE, dubai(2025, 3, 1, 20, 0))


def test_no_preset_at_all():
    svc = ShiftService(FakeShiftRepo())

    assert svc.get_segment_for_punch(EMPLOYEE, dubai(2025, 3, 1, 9, 0)) is None
    with pytest.raises(NotFoundError):
        svc.get_active_segment_for_user(EMPLOYEE, dubai(2025, 3, 1, 9, 0))
