from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_value(value: float, field_name: str, min_value: float) -> float:
    if value is None or value < min_value:
        raise ValidationError(f"{field_name} must be {min_value} or greater")
    return value


def require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Admin permission required")
