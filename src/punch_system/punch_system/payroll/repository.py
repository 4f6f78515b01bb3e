from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import BreakDeductionMode
from .model import PayrollItem, PayrollRun, SalaryRule


class PayrollRepository(Protocol):
    def list_active_rules(self) -> Sequence[SalaryRule]:
        """Active rules, newest effective_from first."""

        raise NotImplementedError

    def get_rule(self, rule_id: int) -> Optional[SalaryRule]:
        raise NotImplementedError

    def create_rule(
        self,
        *,
        name: str,
        base_hourly_rate: float,
        overtime_multiplier: float,
        late_penalty_per_minute: float,
        break_deduction_mode: BreakDeductionMode,
        effective_from: date,
        effective_to: Optional[date],
        created_by: int,
    ) -> SalaryRule:
        raise NotImplementedError

    def create_run(
        self,
        *,
        local_date_from: str,
        local_date_to: str,
        team_id: Optional[int],
        salary_rule_id: int,
        created_by: int,
        notes: Optional[str],
        items: Sequence[PayrollItem],
    ) -> PayrollRun:
        """Persist the run and all its items atomically."""

        raise NotImplementedError

    def get_run(self, run_id: int) -> Optional[PayrollRun]:
        raise NotImplementedError

    def list_runs(self) -> Sequence[PayrollRun]:
        raise NotImplementedError

    def get_run_items(self, run_id: int) -> Sequence[PayrollItem]:
        raise NotImplementedError

    def finalize_run(self, *, run_id: int, finalized_at: datetime, finalized_by: int) -> PayrollRun:
        raise NotImplementedError
