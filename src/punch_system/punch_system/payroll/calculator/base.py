from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollComputationInput, PayrollComputationResult


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, data: PayrollComputationInput) -> PayrollComputationResult:
        raise NotImplementedError
