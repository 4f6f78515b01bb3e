from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MonthlyReport, MonthlyReportSummary


class MonthlyReportRepository(Protocol):
    def get_by_scope_key(self, scope_key: str) -> Optional[MonthlyReport]:
        raise NotImplementedError

    def create(
        self,
        *,
        scope_key: str,
        year: int,
        month: int,
        team_id: Optional[int],
        summary: MonthlyReportSummary,
        generated_by: Optional[int],
    ) -> MonthlyReport:
        """Insert a snapshot; ``scope_key`` is unique."""

        raise NotImplementedError

    def list_reports(self) -> Sequence[MonthlyReport]:
        """Newest period first."""

        raise NotImplementedError
