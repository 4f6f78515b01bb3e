from __future__ import annotations

import math

from ...core.enums import BreakDeductionMode
from ..model import PayrollComputationInput, PayrollComputationResult
from .base import PayrollCalculator


def round2(value: float) -> float:
    """Round to cents, half up."""
    return math.floor(value * 100 + 0.5) / 100


def payable_minutes(worked: int, breaks: int, overtime: int, mode: BreakDeductionMode) -> int:
    if mode == BreakDeductionMode.UNPAID_ALL_BREAKS:
        return max(0, worked - breaks)
    if mode == BreakDeductionMode.UNPAID_OVERTIME_ONLY:
        # only break time not covered by overtime is unpaid
        return max(0, worked - max(0, breaks - overtime))
    return worked


def compute_payroll_item(data: PayrollComputationInput) -> PayrollComputationResult:
    """Turn one employee's minute totals and a rule into pay figures.

    Negative minute inputs are clamped to zero rather than rejected.
    """

    worked = max(0, data.worked_minutes)
    breaks = max(0, data.break_minutes)
    overtime = max(0, data.overtime_minutes)
    late = max(0, data.late_minutes)
    rule = data.rule

    payable = payable_minutes(worked, breaks, overtime, rule.break_deduction_mode)
    regular = max(0, payable - overtime)

    regular_pay = (regular / 60) * rule.base_hourly_rate
    overtime_pay = (overtime / 60) * rule.base_hourly_rate * rule.overtime_multiplier
    gross = round2(regular_pay + overtime_pay)

    penalty = round2(late * rule.late_penalty_per_minute)
    final = round2(max(0, gross - penalty))

    return PayrollComputationResult(
        employee_id=data.employee_id,
        employee_name=data.employee_name,
        payable_minutes=payable,
        regular_minutes=regular,
        overtime_minutes=overtime,
        gross_pay=gross,
        late_penalty=penalty,
        final_pay=final,
        metadata={
            "workedMinutes": worked,
            "breakMinutes": breaks,
            "lateMinutes": late,
            "breakDeductionMode": rule.break_deduction_mode.value,
        },
    )


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hourly base, overtime multiplier, per-minute late penalty."""

    def compute(self, data: PayrollComputationInput) -> PayrollComputationResult:
        return compute_payroll_item(data)
