# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Balance row
# ---------------------------------------------------------------------------


class LeaveBalanceResponse(BaseModel):
    """A stored balance row, or a synthesized default when ``id`` is None."""

    id: uuid.UUID | None
    employee_id: uuid.UUID
    year: int
    vacation_days_total: float
    vacation_days_used: float
    vacation_days_remaining: float
    sick_days_used: float
    special_leave_used: float
    compensation_hours: float
    compensation_used: float
    compensation_balance: float = Field(description="Signed; negative when more hours were used than accrued")
    notes: str | None
    last_updated_by: str | None
    created_at: datetime | None
    updated_at: datetime | None


class UpsertLeaveBalanceRequest(BaseModel):
    """Single-row write. Every key that is present overwrites the stored value.

    Omitted keys keep their stored value, or their creation default when the
    row does not exist yet. Range checks happen in the engine so the offending
    field is reported uniformly.
    """

    employee_id: uuid.UUID
    year: int
    vacation_days_total: float | None = None
    vacation_days_used: float | None = None
    sick_days_used: float | None = None
    special_leave_used: float | None = None
    compensation_hours: float | None = None
    compensation_used: float | None = None
    notes: str | None = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Bulk initialize
# ---------------------------------------------------------------------------


class DefaultSettings(BaseModel):
    """Workforce-wide defaults applied by bulk initialize."""

    vacation_days_total: float = 25
    compensation_hours: float = 0


class BulkInitializeRequest(BaseModel):
    """Request body for bulk initialization of a year."""

    year: int
    default_settings: DefaultSettings = Field(default_factory=DefaultSettings)


class BulkResultItem(BaseModel):
    """One successfully overwritten balance row."""

    employee_id: uuid.UUID
    employee_name: str
    vacation_days_assigned: float


class BulkFailure(BaseModel):
    """One employee whose row could not be written."""

    employee_id: uuid.UUID
    employee_name: str | None = None
    error: str
    detail: str


class BulkInitializeResponse(BaseModel):
    """Outcome of a fully successful bulk initialization."""

    year: int
    employees_processed: int
    results: list[BulkResultItem]


# ---------------------------------------------------------------------------
# Year view
# ---------------------------------------------------------------------------


class EmployeeBalanceView(BaseModel):
    """An employee joined with their balance for the requested year."""

    id: uuid.UUID
    name: str
    email: str
    employee_type: str
    leave_balance: LeaveBalanceResponse


class YearViewResponse(BaseModel):
    """Every roster employee with their balance for one year."""

    year: int
    total_employees: int
    employees: list[EmployeeBalanceView]


# ---------------------------------------------------------------------------
# Attendance summary
# ---------------------------------------------------------------------------


class VacationDaysSummary(BaseModel):
    entitled: float
    used: float
    remaining: float


class SickDaysSummary(BaseModel):
    used: float


class SpecialLeaveSummary(BaseModel):
    used: float


class CompensationTimeSummary(BaseModel):
    available: float
    used: float
    pending: float
    balance: float


class LeaveSummaryResponse(BaseModel):
    """Balance figures shaped for embedding into an attendance payload."""

    employee_id: uuid.UUID
    year: int
    vacation_days: VacationDaysSummary
    sick_days: SickDaysSummary
    special_leave: SpecialLeaveSummary
    compensation_time: CompensationTimeSummary


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class BalanceHistoryEntry(BaseModel):
    """One audit record for a balance row."""

    id: uuid.UUID
    actor_id: uuid.UUID
    actor_name: str | None
    action: str
    before_json: dict[str, Any] | None
    after_json: dict[str, Any] | None
    created_at: datetime


class BalanceHistoryResponse(BaseModel):
    """Audit records for one balance row, newest first."""

    items: list[BalanceHistoryEntry]
    total: int
