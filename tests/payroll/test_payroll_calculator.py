from src.punch_system.punch_system.core.enums import BreakDeductionMode
from src.punch_system.punch_system.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    compute_payroll_item,
    round2,
)
from src.punch_system.punch_system.payroll.model import PayrollComputationInput, PayrollRuleSnapshot


def rule(mode=BreakDeductionMode.NONE, rate=20.0, multiplier=1.5, penalty=0.5):
    return PayrollRuleSnapshot(
        base_hourly_rate=rate,
        overtime_multiplier=multiplier,
        late_penalty_per_minute=penalty,
        break_deduction_mode=mode,
    )


def payroll_input(worked=0, breaks=0, overtime=0, late=0, **rule_kwargs):
    return PayrollComputationInput(
        employee_id=1,
        employee_name="Sara",
        worked_minutes=worked,
        break_minutes=breaks,
        overtime_minutes=overtime,
        late_minutes=late,
        rule=rule(**rule_kwargs),
    )


def test_unpaid_breaks_and_late_penalty():
    result = compute_payroll_item(
        payroll_input(worked=480, breaks=60, overtime=0, late=10, mode=BreakDeductionMode.UNPAID_ALL_BREAKS)
    )

    assert result.payable_minutes == 420
    assert result.regular_minutes == 420
    assert result.gross_pay == 140.00
    assert result.late_penalty == 5.00
    assert result.final_pay == 135.00


def test_paid_breaks_keep_all_worked_minutes():
    result = compute_payroll_item(payroll_input(worked=480, breaks=60))

    assert result.payable_minutes == 480
    assert result.gross_pay == 160.00


def test_overtime_is_paid_with_multiplier():
    result = compute_payroll_item(payroll_input(worked=540, overtime=60))

    assert result.regular_minutes == 480
    assert result.overtime_minutes == 60
    # 8h * 20 + 1h * 20 * 1.5
    assert result.gross_pay == 190.00


def test_unpaid_overtime_only_deducts_breaks_beyond_overtime():
    covered = compute_payroll_item(
        payroll_input(worked=540, breaks=30, overtime=60, mode=BreakDeductionMode.UNPAID_OVERTIME_ONLY)
    )
    uncovered = compute_payroll_item(
        payroll_input(worked=540, breaks=90, overtime=60, mode=BreakDeductionMode.UNPAID_OVERTIME_ONLY)
    )

    assert covered.payable_minutes == 540
    assert uncovered.payable_minutes == 510


def test_negative_inputs_are_clamped():
    result = compute_payroll_item(payroll_input(worked=-10, breaks=-5, overtime=-3, late=-7))

    assert result.payable_minutes == 0
    assert result.regular_minutes == 0
    assert result.gross_pay == 0.0
    assert result.late_penalty == 0.0
    assert result.final_pay == 0.0


def test_final_pay_never_goes_negative():
    result = compute_payroll_item(payroll_input(worked=60, late=500))

    assert result.gross_pay == 20.00
    assert result.late_penalty == 250.00
    assert result.final_pay == 0.0


def test_metadata_carries_inputs():
    result = compute_payroll_item(
        payroll_input(worked=480, breaks=60, late=10, mode=BreakDeductionMode.UNPAID_ALL_BREAKS)
    )

    assert result.metadata == {
        "workedMinutes": 480,
        "breakMinutes": 60,
        "lateMinutes": 10,
        "breakDeductionMode": "UNPAID_ALL_BREAKS",
    }


def test_round2_rounds_to_cents():
    assert round2(10.004) == 10.0
    assert round2(10.006) == 10.01
    assert round2(1 / 3) == 0.33


def test_standard_calculator_delegates_to_compute():
    data = payroll_input(worked=90)

    assert StandardPayrollCalculator().compute(data) == compute_payroll_item(data)
