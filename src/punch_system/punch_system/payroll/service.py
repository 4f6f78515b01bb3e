from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.repository import DutySessionRepository
from ..audit.model import AuditEvent
from ..audit.repository import AuditRepository
from ..breaks.repository import BreakRepository
from ..common.datetime_utils import date_in_zone, parse_iso_date, utc_now
from ..common.validators import require_admin, require_min_value, require_non_empty
from ..core import constants
from ..core.enums import BreakDeductionMode, PayrollRunStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollComputationInput, PayrollItem, PayrollRun, SalaryRule
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        sessions: DutySessionRepository,
        breaks: BreakRepository,
        audit: AuditRepository,
        *,
        calculator: PayrollCalculator | None = None,
        app_timezone: str = constants.DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._payroll = payroll
        self._employees = employees
        self._sessions = sessions
        self._breaks = breaks
        self._audit = audit
        self._calculator = calculator or StandardPayrollCalculator()
        self._app_timezone = app_timezone
        self._clock = clock

    def list_salary_rules(self) -> Sequence[SalaryRule]:
        return self._payroll.list_active_rules()

    def create_salary_rule(
        self,
        *,
        current_role: Role,
        actor_id: int,
        name: str,
        base_hourly_rate: float,
        overtime_multiplier: float,
        late_penalty_per_minute: float,
        effective_from: str,
        effective_to: Optional[str] = None,
        break_deduction_mode: BreakDeductionMode = BreakDeductionMode.NONE,
    ) -> SalaryRule:
        require_admin(current_role)
        name = require_non_empty(name, "name")
        require_min_value(base_hourly_rate, "base_hourly_rate", 0)
        require_min_value(overtime_multiplier, "overtime_multiplier", 1)
        require_min_value(late_penalty_per_minute, "late_penalty_per_minute", 0)

        start = parse_iso_date(effective_from)
        end = parse_iso_date(effective_to) if effective_to else None
        if end is not None and end < start:
            raise ValidationError("effective_to must be after or equal to effective_from")

        rule = self._payroll.create_rule(
            name=name,
            base_hourly_rate=float(base_hourly_rate),
            overtime_multiplier=float(overtime_multiplier),
            late_penalty_per_minute=float(late_penalty_per_minute),
            break_deduction_mode=BreakDeductionMode(break_deduction_mode),
            effective_from=start,
            effective_to=end,
            created_by=actor_id,
        )
        logger.info("salary rule created id=%s name=%s", rule.rule_id, rule.name)
        return rule

    def resolve_salary_rule(self, rule_id: Optional[int] = None) -> SalaryRule:
        """The explicitly requested rule, else the newest active rule covering today."""

        if rule_id is not None:
            rule = self._payroll.get_rule(int(rule_id))
            if not rule:
                raise NotFoundError("Salary rule not found")
            return rule

        today = parse_iso_date(date_in_zone(self._clock(), self._app_timezone))
        candidates = [r for r in self._payroll.list_active_rules() if r.is_active and r.covers(today)]
        if not candidates:
            raise NotFoundError("No active salary rule found")
        return max(candidates, key=lambda r: r.effective_from)

    def list_runs(self) -> Sequence[PayrollRun]:
        return self._payroll.list_runs()

    def get_run_items(self, run_id: int) -> Sequence[PayrollItem]:
        if not self._payroll.get_run(run_id):
            raise NotFoundError("Payroll run not found")
        return self._payroll.get_run_items(run_id)

    def generate_run(
        self,
        *,
        current_role: Role,
        actor_id: int,
        local_date_from: str,
        local_date_to: str,
        team_id: Optional[int] = None,
        salary_rule_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> PayrollRun:
        require_admin(current_role)
        if parse_iso_date(local_date_from) > parse_iso_date(local_date_to):
            raise ValidationError("local_date_from must be <= local_date_to")

        rule = self.resolve_salary_rule(salary_rule_id)
        employees = self._employees.list_active_employees(team_id=team_id)
        if not employees:
            raise NotFoundError("No employees found for selected filters")

        worked: dict[int, int] = defaultdict(int)
        late: dict[int, int] = defaultdict(int)
        overtime: dict[int, int] = defaultdict(int)
        for session in self._sessions.list_closed(
            local_date_from=local_date_from, local_date_to=local_date_to, team_id=team_id
        ):
            worked[session.user_id] += session.worked_minutes()
            late[session.user_id] += session.late_minutes
            overtime[session.user_id] += session.overtime_minutes

        break_minutes: dict[int, int] = defaultdict(int)
        for brk in self._breaks.list_finished(
            local_date_from=local_date_from, local_date_to=local_date_to, team_id=team_id
        ):
            break_minutes[brk.user_id] += brk.actual_minutes or 0

        snapshot = rule.snapshot()
        items: list[PayrollItem] = []
        for employee in employees:
            uid = employee.user_id
            computed = self._calculator.compute(
                PayrollComputationInput(
                    employee_id=uid,
                    employee_name=employee.display_name,
                    worked_minutes=worked[uid],
                    break_minutes=break_minutes[uid],
                    overtime_minutes=overtime[uid],
                    late_minutes=late[uid],
                    rule=snapshot,
                )
            )
            items.append(
                PayrollItem(
                    user_id=uid,
                    worked_minutes=worked[uid],
                    break_minutes=break_minutes[uid],
                    payable_minutes=computed.payable_minutes,
                    overtime_minutes=computed.overtime_minutes,
                    late_minutes=late[uid],
                    gross_pay=computed.gross_pay,
                    late_penalty=computed.late_penalty,
                    final_pay=computed.final_pay,
                    details=computed.metadata,
                )
            )

        run = self._payroll.create_run(
            local_date_from=local_date_from,
            local_date_to=local_date_to,
            team_id=team_id,
            salary_rule_id=rule.rule_id,
            created_by=actor_id,
            notes=notes,
            items=items,
        )
        logger.info(
            "payroll run generated id=%s period=%s..%s employees=%d rule=%s",
            run.run_id, local_date_from, local_date_to, len(items), rule.rule_id,
        )

        self._audit.record(
            AuditEvent(
                actor_user_id=actor_id,
                action="PAYROLL_RUN_GENERATED",
                entity_type="PayrollRun",
                entity_id=run.run_id,
                payload={
                    "localDateFrom": local_date_from,
                    "localDateTo": local_date_to,
                    "teamId": team_id,
                    "employees": len(items),
                    "salaryRuleId": rule.rule_id,
                },
            )
        )
        return run

    def finalize_run(self, *, current_role: Role, actor_id: int, run_id: int) -> PayrollRun:
        require_admin(current_role)
        run = self._payroll.get_run(run_id)
        if not run:
            raise NotFoundError("Payroll run not found")
        if run.status == PayrollRunStatus.FINALIZED:
            return run

        updated = self._payroll.finalize_run(run_id=run_id, finalized_at=self._clock(), finalized_by=actor_id)
        self._audit.record(
            AuditEvent(
                actor_user_id=actor_id,
                action="PAYROLL_RUN_FINALIZED",
                entity_type="PayrollRun",
                entity_id=updated.run_id,
            )
        )
        return updated
