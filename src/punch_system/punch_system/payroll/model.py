from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import BreakDeductionMode, PayrollRunStatus


@dataclass(frozen=True)
class PayrollRuleSnapshot:
    """Pay rule values frozen at computation time."""

    base_hourly_rate: float
    overtime_multiplier: float = 1.0
    late_penalty_per_minute: float = 0.0
    break_deduction_mode: BreakDeductionMode = BreakDeductionMode.NONE
    name: Optional[str] = None


@dataclass(frozen=True)
class PayrollComputationInput:
    employee_id: int
    employee_name: str
    worked_minutes: int
    break_minutes: int
    overtime_minutes: int
    late_minutes: int
    rule: PayrollRuleSnapshot


@dataclass(frozen=True)
class PayrollComputationResult:
    employee_id: int
    employee_name: str
    payable_minutes: int
    regular_minutes: int
    overtime_minutes: int
    gross_pay: float
    late_penalty: float
    final_pay: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SalaryRule:
    rule_id: int
    name: str
    base_hourly_rate: float
    overtime_multiplier: float
    late_penalty_per_minute: float
    break_deduction_mode: BreakDeductionMode
    effective_from: date
    effective_to: Optional[date] = None
    is_active: bool = True

    def covers(self, day: date) -> bool:
        return self.effective_from <= day and (self.effective_to is None or self.effective_to >= day)

    def snapshot(self) -> PayrollRuleSnapshot:
        return PayrollRuleSnapshot(
            name=self.name,
            base_hourly_rate=float(self.base_hourly_rate),
            overtime_multiplier=float(self.overtime_multiplier),
            late_penalty_per_minute=float(self.late_penalty_per_minute),
            break_deduction_mode=self.break_deduction_mode,
        )


@dataclass(frozen=True)
class PayrollItem:
    user_id: int
    worked_minutes: int
    break_minutes: int
    payable_minutes: int
    overtime_minutes: int
    late_minutes: int
    gross_pay: float
    late_penalty: float
    final_pay: float
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PayrollRun:
    run_id: int
    local_date_from: str
    local_date_to: str
    salary_rule_id: int
    status: PayrollRunStatus = PayrollRunStatus.DRAFT
    team_id: Optional[int] = None
    created_by: Optional[int] = None
    notes: Optional[str] = None
    item_count: int = 0
    finalized_at: Optional[datetime] = None
    finalized_by: Optional[int] = None
