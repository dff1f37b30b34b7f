# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leave_engine.models.base import TimestampMixin, UUIDBase, now_utc


class LeaveBalance(UUIDBase, TimestampMixin, table=True):
    """Per-employee, per-year leave and compensation ledger row.

    ``vacation_days_remaining`` is stored for reporting but always recomputed
    by the engine on write. ``last_updated_by`` and ``updated_at`` are only
    ever set together.
    """

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "year", name="uq_leave_balance_employee_year"),
        sa.Index("ix_leave_balance_company_year", "company_id", "year"),
    )

    company_id: uuid.UUID = Field(index=True)
    employee_id: uuid.UUID = Field(index=True)
    year: int
    vacation_days_total: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    vacation_days_used: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    vacation_days_remaining: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    sick_days_used: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    special_leave_used: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    compensation_hours: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    compensation_used: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    notes: str | None = Field(default=None, sa_type=sa.Text)
    last_updated_by: str | None = Field(default=None, max_length=255)
    updated_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
