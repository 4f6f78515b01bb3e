from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AssignmentTargetType
from .model import ShiftAssignment, ShiftOverride, ShiftPreset, ShiftSegment


class ShiftRepository(Protocol):
    def get_preset(self, preset_id: int) -> Optional[ShiftPreset]:
        raise NotImplementedError

    def list_presets(self) -> Sequence[ShiftPreset]:
        """Active presets ordered by team then name."""

        raise NotImplementedError

    def create_preset(
        self,
        *,
        name: str,
        timezone: str,
        team_id: Optional[int],
        is_default: bool,
        segments: Sequence[ShiftSegment],
    ) -> ShiftPreset:
        raise NotImplementedError

    def get_default_preset(self, *, team_id: Optional[int]) -> Optional[ShiftPreset]:
        """Active default preset of a team, or the global one when team_id is None."""

        raise NotImplementedError

    def find_override(
        self, *, target_type: AssignmentTargetType, target_id: int, on_date: date
    ) -> Optional[ShiftOverride]:
        """Most recently created override for the target on that date."""

        raise NotImplementedError

    def create_override(
        self,
        *,
        target_type: AssignmentTargetType,
        target_id: int,
        preset_id: int,
        override_date: date,
        reason: Optional[str] = None,
    ) -> ShiftOverride:
        raise NotImplementedError

    def find_assignment(
        self, *, target_type: AssignmentTargetType, target_id: int, on_date: date
    ) -> Optional[ShiftAssignment]:
        """Active assignment covering the date with the latest effective_from."""

        raise NotImplementedError

    def replace_assignment(
        self,
        *,
        target_type: AssignmentTargetType,
        target_id: int,
        preset_id: int,
        effective_from: date,
        effective_to: Optional[date],
    ) -> ShiftAssignment:
        """Close earlier open assignments of the target the day before
        ``effective_from``, deactivate one starting the same day, then insert.

        Implementations run this in one transaction.
        """

        raise NotImplementedError
