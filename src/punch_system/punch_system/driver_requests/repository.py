from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DriverRequestStatus, DriverStatus
from .model import DriverRequest, TripDetails


class DriverRequestRepository(Protocol):
    def create(self, *, user_id: int, trip: TripDetails) -> DriverRequest:
        """Insert a PENDING request."""

        raise NotImplementedError

    def get(self, request_id: int) -> Optional[DriverRequest]:
        raise NotImplementedError

    def list_requests(self, *, user_id: Optional[int] = None) -> Sequence[DriverRequest]:
        """Newest first; all users when ``user_id`` is None."""

        raise NotImplementedError

    def list_available(self) -> Sequence[DriverRequest]:
        """APPROVED requests without a driver, earliest requested date first."""

        raise NotImplementedError

    def list_for_driver(self, driver_id: int) -> Sequence[DriverRequest]:
        """Requests assigned to ``driver_id``, earliest requested date first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: DriverRequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        admin_note: Optional[str],
    ) -> DriverRequest:
        raise NotImplementedError

    def assign_driver(self, *, request_id: int, driver_id: int) -> DriverRequest:
        """Move the request to IN_PROGRESS and mark the driver BUSY, in one transaction."""

        raise NotImplementedError

    def complete(self, *, request_id: int, driver_id: int) -> DriverRequest:
        """Move the request to COMPLETED and mark the driver AVAILABLE, in one transaction."""

        raise NotImplementedError

    def set_driver_status(self, *, user_id: int, status: DriverStatus) -> DriverStatus:
        raise NotImplementedError
