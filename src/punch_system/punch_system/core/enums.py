from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    DRIVER = "DRIVER"


class TimeSource(str, Enum):
    SERVER = "SERVER"
    CLIENT = "CLIENT"


class TrustLevel(str, Enum):
    """How far a client-reported timestamp is believed."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class AssignmentTargetType(str, Enum):
    TEAM = "TEAM"
    USER = "USER"


class DutySessionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class BreakSessionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    AUTO_CLOSED = "AUTO_CLOSED"
    CANCELLED = "CANCELLED"


class BreakDeductionMode(str, Enum):
    """Policy deciding whether break time is paid."""

    NONE = "NONE"
    UNPAID_ALL_BREAKS = "UNPAID_ALL_BREAKS"
    UNPAID_OVERTIME_ONLY = "UNPAID_OVERTIME_ONLY"


class PayrollRunStatus(str, Enum):
    DRAFT = "DRAFT"
    FINALIZED = "FINALIZED"


class RequestStatus(str, Enum):
    """Approval workflow state of a shift change request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ShiftRequestType(str, Enum):
    HALF_DAY_MORNING = "HALF_DAY_MORNING"
    HALF_DAY_EVENING = "HALF_DAY_EVENING"
    FULL_DAY_OFF = "FULL_DAY_OFF"
    CUSTOM = "CUSTOM"


class DriverRequestStatus(str, Enum):
    """Lifecycle of a driver trip request: admin decision, then driver pickup."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class DriverStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"
    ON_BREAK = "ON_BREAK"
    OFFLINE = "OFFLINE"
