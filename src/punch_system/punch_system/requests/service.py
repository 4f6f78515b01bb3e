from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, utc_now
from ..common.validators import require_admin
from ..core.enums import RequestStatus, Role, ShiftRequestType
from ..core.exceptions import NotFoundError, ValidationError
from ..shifts.repository import ShiftRepository
from .model import ShiftChangeRequest
from .repository import ShiftChangeRequestRepository

logger = logging.getLogger(__name__)


class RequestService:
    def __init__(
        self,
        requests: ShiftChangeRequestRepository,
        shifts: ShiftRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._requests = requests
        self._shifts = shifts
        self._clock = clock

    def create_request(
        self,
        *,
        user_id: int,
        requested_date: str,
        request_type: ShiftRequestType = ShiftRequestType.CUSTOM,
        shift_preset_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> ShiftChangeRequest:
        request_type = ShiftRequestType(request_type)

        if shift_preset_id:
            preset = self._shifts.get_preset(int(shift_preset_id))
            if not preset or not preset.is_active:
                raise ValidationError("Selected shift preset is not active")

        # Only custom requests name a target preset.
        if request_type != ShiftRequestType.CUSTOM:
            shift_preset_id = None

        created = self._requests.create(
            user_id=int(user_id),
            request_type=request_type,
            requested_date=parse_iso_date(requested_date),
            shift_preset_id=int(shift_preset_id) if shift_preset_id else None,
            reason=(reason or "").strip() or None,
        )
        logger.info("shift change request id=%s user=%s type=%s", created.request_id, user_id, request_type.value)
        return created

    def list_requests(self, *, current_role: Role, user_id: int) -> Sequence[ShiftChangeRequest]:
        if current_role == Role.ADMIN:
            return self._requests.list_requests()
        return self._requests.list_requests(user_id=int(user_id))

    def pending_summary(self) -> dict:
        return {"pending": self._requests.count_by_status(RequestStatus.PENDING)}

    def approve_request(self, *, current_role: Role, reviewer_id: int, request_id: int) -> ShiftChangeRequest:
        return self._decide(current_role, reviewer_id, request_id, RequestStatus.APPROVED)

    def reject_request(self, *, current_role: Role, reviewer_id: int, request_id: int) -> ShiftChangeRequest:
        return self._decide(current_role, reviewer_id, request_id, RequestStatus.REJECTED)

    def _decide(
        self, current_role: Role, reviewer_id: int, request_id: int, status: RequestStatus
    ) -> ShiftChangeRequest:
        require_admin(current_role)

        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            verb = "approved" if status == RequestStatus.APPROVED else "rejected"
            raise ValidationError(f"Only pending requests can be {verb}")

        return self._requests.decide(
            request_id=req.request_id,
            status=status,
            reviewed_by=int(reviewer_id),
            reviewed_at=self._clock(),
        )
