from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, ShiftRequestType


@dataclass(frozen=True)
class ShiftChangeRequest:
    request_id: int
    user_id: int
    request_type: ShiftRequestType
    requested_date: date
    status: RequestStatus
    shift_preset_id: Optional[int] = None
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
