from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import DutySession


class DutySessionRepository(Protocol):
    def get_active_for_user(self, user_id: int) -> Optional[DutySession]:
        """Latest ACTIVE session of the user by punch-on time."""

        raise NotImplementedError

    def get_last_closed_for_user(self, user_id: int) -> Optional[DutySession]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        team_id: Optional[int],
        shift_preset_id: Optional[int],
        shift_preset_segment_id: Optional[int],
        shift_date: str,
        local_date: str,
        scheduled_start_local: Optional[str],
        scheduled_end_local: Optional[str],
        punched_on_at: datetime,
        is_late: bool,
        late_minutes: int,
        note: Optional[str] = None,
    ) -> DutySession:
        """Insert an ACTIVE session.

        Implementations enforce one ACTIVE session per user (unique constraint
        or check-then-insert in a transaction).
        """

        raise NotImplementedError

    def close(
        self,
        *,
        session_id: int,
        punched_off_at: datetime,
        overtime_minutes: int,
        note: Optional[str] = None,
    ) -> DutySession:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, local_date_from: str, local_date_to: str) -> Sequence[DutySession]:
        raise NotImplementedError

    def list_closed(
        self,
        *,
        local_date_from: str,
        local_date_to: str,
        user_id: Optional[int] = None,
        team_id: Optional[int] = None,
    ) -> Sequence[DutySession]:
        raise NotImplementedError

    def list_active_started_before(self, cutoff: datetime) -> Sequence[DutySession]:
        raise NotImplementedError

    def auto_close(self, *, session_id: int, punched_off_at: datetime, note: str) -> DutySession:
        raise NotImplementedError
