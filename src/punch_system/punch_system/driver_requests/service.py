from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, utc_now
from ..common.validators import require_admin, require_non_empty
from ..core.enums import DriverRequestStatus, DriverStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import EmployeeRepository
from .model import DriverRequest, TripDetails
from .repository import DriverRequestRepository

logger = logging.getLogger(__name__)


def _optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _parse_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date(str(value))
    except ValueError as exc:
        raise ValidationError(f"{field_name} is invalid") from exc


class DriverRequestService:
    """Trip requests: an admin approves or rejects, then a driver takes the trip and completes it."""

    def __init__(
        self,
        requests: DriverRequestRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._requests = requests
        self._employees = employees
        self._clock = clock

    def create_request(
        self,
        *,
        user_id: int,
        requested_date: str,
        requested_time: str,
        destination: str,
        purpose: Optional[str] = None,
        is_round_trip: bool = False,
        return_date: Optional[str] = None,
        return_time: Optional[str] = None,
        return_location: Optional[str] = None,
        contact_number: Optional[str] = None,
    ) -> DriverRequest:
        trip = TripDetails(
            requested_date=_parse_date(requested_date, "requested_date"),
            requested_time=require_non_empty(requested_time, "requested_time"),
            destination=require_non_empty(destination, "destination"),
            purpose=_optional_text(purpose),
            is_round_trip=bool(is_round_trip),
            return_date=_parse_date(return_date, "return_date") if return_date else None,
            return_time=_optional_text(return_time),
            return_location=_optional_text(return_location),
            contact_number=_optional_text(contact_number),
        )

        created = self._requests.create(user_id=int(user_id), trip=trip)
        logger.info("driver request id=%s user=%s date=%s", created.request_id, user_id, trip.requested_date)
        return created

    def list_my_requests(self, *, user_id: int) -> Sequence[DriverRequest]:
        return self._requests.list_requests(user_id=int(user_id))

    def list_all_requests(self, *, current_role: Role) -> Sequence[DriverRequest]:
        require_admin(current_role)
        return self._requests.list_requests()

    def list_available_for_drivers(self) -> Sequence[DriverRequest]:
        return self._requests.list_available()

    def list_my_assignments(self, *, driver_id: int) -> Sequence[DriverRequest]:
        return self._requests.list_for_driver(int(driver_id))

    def approve_request(
        self, *, current_role: Role, reviewer_id: int, request_id: int, admin_note: Optional[str] = None
    ) -> DriverRequest:
        return self._decide(current_role, reviewer_id, request_id, DriverRequestStatus.APPROVED, admin_note)

    def reject_request(
        self, *, current_role: Role, reviewer_id: int, request_id: int, admin_note: Optional[str] = None
    ) -> DriverRequest:
        return self._decide(current_role, reviewer_id, request_id, DriverRequestStatus.REJECTED, admin_note)

    def accept_request(self, *, driver_id: int, request_id: int) -> DriverRequest:
        self._require_driver(driver_id, "Only drivers can accept requests")

        req = self._get(request_id)
        if req.status != DriverRequestStatus.APPROVED:
            raise ValidationError("Only approved requests can be accepted by a driver")
        if req.driver_id is not None:
            raise ValidationError("This request has already been accepted by another driver")

        accepted = self._requests.assign_driver(request_id=req.request_id, driver_id=int(driver_id))
        logger.info("driver request id=%s accepted by driver=%s", req.request_id, driver_id)
        return accepted

    def complete_request(self, *, driver_id: int, request_id: int) -> DriverRequest:
        req = self._get(request_id)
        if req.status != DriverRequestStatus.IN_PROGRESS:
            raise ValidationError("Only in-progress requests can be completed")
        if req.driver_id != int(driver_id):
            raise AuthorizationError("Only the assigned driver can complete this request")

        completed = self._requests.complete(request_id=req.request_id, driver_id=int(driver_id))
        logger.info("driver request id=%s completed by driver=%s", req.request_id, driver_id)
        return completed

    def set_driver_status(self, *, user_id: int, status: DriverStatus) -> DriverStatus:
        self._require_driver(user_id, "Only drivers can update driver status")
        return self._requests.set_driver_status(user_id=int(user_id), status=DriverStatus(status))

    def _require_driver(self, user_id: int, message: str) -> None:
        user = self._employees.get_by_id(int(user_id))
        if not user or not (user.is_driver or user.role == Role.DRIVER):
            raise AuthorizationError(message)

    def _get(self, request_id: int) -> DriverRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Driver request not found")
        return req

    def _decide(
        self,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        status: DriverRequestStatus,
        admin_note: Optional[str],
    ) -> DriverRequest:
        require_admin(current_role)

        req = self._get(request_id)
        if req.status != DriverRequestStatus.PENDING:
            verb = "approved" if status == DriverRequestStatus.APPROVED else "rejected"
            raise ValidationError(f"Only pending requests can be {verb}")

        return self._requests.decide(
            request_id=req.request_id,
            status=status,
            reviewed_by=int(reviewer_id),
            reviewed_at=self._clock(),
            admin_note=_optional_text(admin_note),
        )
