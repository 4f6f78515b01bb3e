from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, ShiftRequestType
from .model import ShiftChangeRequest


class ShiftChangeRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        request_type: ShiftRequestType,
        requested_date: date,
        shift_preset_id: Optional[int],
        reason: Optional[str],
    ) -> ShiftChangeRequest:
        """Insert a PENDING request."""

        raise NotImplementedError

    def get(self, request_id: int) -> Optional[ShiftChangeRequest]:
        raise NotImplementedError

    def list_requests(self, *, user_id: Optional[int] = None) -> Sequence[ShiftChangeRequest]:
        """Newest first; all users when ``user_id`` is None."""

        raise NotImplementedError

    def count_by_status(self, status: RequestStatus) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
    ) -> ShiftChangeRequest:
        raise NotImplementedError
