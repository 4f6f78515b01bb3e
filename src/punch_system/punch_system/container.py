from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.factory import AttendanceStrategyFactory
from .attendance.repository import DutySessionRepository
from .attendance.service import AttendanceService
from .audit.repository import AuditRepository
from .breaks.repository import BreakRepository
from .breaks.service import BreakService
from .common.datetime_utils import utc_now
from .common.event_time import EventTimeOptions
from .core.settings import AppSettings
from .driver_requests.repository import DriverRequestRepository
from .driver_requests.service import DriverRequestService
from .jobs.service import JobsService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reports.repository import MonthlyReportRepository
from .reports.service import ReportService
from .requests.repository import ShiftChangeRequestRepository
from .requests.service import RequestService
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .users.repository import EmployeeRepository, TeamRepository


@dataclass(frozen=True)
class Repositories:
    """Storage adapters; any objects satisfying the repository protocols."""

    employees: EmployeeRepository
    teams: TeamRepository
    shifts: ShiftRepository
    sessions: DutySessionRepository
    breaks: BreakRepository
    payroll: PayrollRepository
    reports: MonthlyReportRepository
    requests: ShiftChangeRequestRepository
    driver_requests: DriverRequestRepository
    audit: AuditRepository


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    repos: Repositories

    shift_service: ShiftService
    attendance_service: AttendanceService
    break_service: BreakService
    payroll_service: PayrollService
    report_service: ReportService
    request_service: RequestService
    driver_request_service: DriverRequestService
    jobs_service: JobsService


def build_container(
    *,
    repos: Repositories,
    settings: AppSettings,
    clock: Callable[[], datetime] = utc_now,
) -> Container:
    event_time_options = EventTimeOptions(
        max_past_hours=settings.max_client_past_hours,
        max_future_minutes=settings.max_client_future_minutes,
        high_trust_skew_minutes=settings.high_trust_skew_minutes,
    )

    shift_service = ShiftService(
        repos.shifts,
        app_timezone=settings.app_timezone,
        default_late_grace_minutes=settings.default_late_grace_minutes,
    )
    attendance_service = AttendanceService(
        repos.sessions,
        shift_service,
        repos.teams,
        repos.audit,
        strategy_factory=AttendanceStrategyFactory(),
        event_time_options=event_time_options,
        app_timezone=settings.app_timezone,
        max_late_minutes=settings.max_late_minutes,
        max_overtime_minutes=settings.max_overtime_minutes,
        clock=clock,
    )
    break_service = BreakService(
        repos.breaks,
        repos.sessions,
        repos.audit,
        event_time_options=event_time_options,
        app_timezone=settings.app_timezone,
        clock=clock,
    )
    payroll_service = PayrollService(
        repos.payroll,
        repos.employees,
        repos.sessions,
        repos.breaks,
        repos.audit,
        calculator=StandardPayrollCalculator(),
        app_timezone=settings.app_timezone,
        clock=clock,
    )
    report_service = ReportService(repos.reports, repos.sessions, repos.breaks, repos.audit)
    request_service = RequestService(repos.requests, repos.shifts, clock=clock)
    driver_request_service = DriverRequestService(repos.driver_requests, repos.employees, clock=clock)
    jobs_service = JobsService(
        repos.sessions,
        repos.breaks,
        report_service,
        repos.audit,
        app_timezone=settings.app_timezone,
        break_grace_minutes=settings.break_grace_minutes,
        max_active_duty_hours=settings.max_active_duty_hours,
        job_actor_id=settings.system_job_user_id,
        clock=clock,
    )

    return Container(
        settings=settings,
        repos=repos,
        shift_service=shift_service,
        attendance_service=attendance_service,
        break_service=break_service,
        payroll_service=payroll_service,
        report_service=report_service,
        request_service=request_service,
        driver_request_service=driver_request_service,
        jobs_service=jobs_service,
    )
