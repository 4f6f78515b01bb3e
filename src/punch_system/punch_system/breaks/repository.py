from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import BreakSessionStatus
from .model import BreakPolicy, BreakSession


class BreakRepository(Protocol):
    def list_active_policies(self) -> Sequence[BreakPolicy]:
        raise NotImplementedError

    def get_policy_by_code(self, code: str) -> Optional[BreakPolicy]:
        raise NotImplementedError

    def create_policy(
        self, *, code: str, name: str, expected_duration_minutes: int, daily_limit: int, is_active: bool
    ) -> BreakPolicy:
        raise NotImplementedError

    def get_active_for_user(self, user_id: int) -> Optional[BreakSession]:
        raise NotImplementedError

    def count_for_policy_on_date(
        self, *, user_id: int, policy_id: int, local_date: str, statuses: Sequence[BreakSessionStatus]
    ) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        duty_session_id: int,
        policy: BreakPolicy,
        local_date: str,
        started_at: datetime,
    ) -> BreakSession:
        raise NotImplementedError

    def finish(
        self,
        *,
        break_id: int,
        ended_at: datetime,
        actual_minutes: int,
        is_overtime: bool,
        status: BreakSessionStatus,
    ) -> BreakSession:
        """Close a break as COMPLETED or AUTO_CLOSED."""

        raise NotImplementedError

    def cancel(self, *, break_id: int, cancelled_at: datetime, cancelled_by: int) -> BreakSession:
        raise NotImplementedError

    def list_active(self) -> Sequence[BreakSession]:
        raise NotImplementedError

    def list_finished(
        self,
        *,
        local_date_from: str,
        local_date_to: str,
        user_id: Optional[int] = None,
        team_id: Optional[int] = None,
    ) -> Sequence[BreakSession]:
        """COMPLETED and AUTO_CLOSED breaks in the local date range."""

        raise NotImplementedError
