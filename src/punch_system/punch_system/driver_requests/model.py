from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DriverRequestStatus


@dataclass(frozen=True)
class TripDetails:
    """What an employee asks for when booking a driver."""

    requested_date: date
    requested_time: str
    destination: str
    purpose: Optional[str] = None
    is_round_trip: bool = False
    return_date: Optional[date] = None
    return_time: Optional[str] = None
    return_location: Optional[str] = None
    contact_number: Optional[str] = None


@dataclass(frozen=True)
class DriverRequest:
    request_id: int
    user_id: int
    trip: TripDetails
    status: DriverRequestStatus
    driver_id: Optional[int] = None
    admin_note: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    @property
    def is_available(self) -> bool:
        """Approved and not yet picked up by a driver."""

        return self.status == DriverRequestStatus.APPROVED and self.driver_id is None
