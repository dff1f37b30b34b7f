# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


class UpsertEmployeeRequest(BaseModel):
    """Request body for upserting an employee in the stub directory."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=1, max_length=255)
    employee_type: str = Field(default="PERMANENT", min_length=1, max_length=50)
    role: str = Field(default="EMPLOYEE", pattern=r"^(ADMIN|MANAGER|EMPLOYEE)$")
    archived: bool = False


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    company_id: uuid.UUID
    name: str
    email: str
    employee_type: str
    role: str
    archived: bool


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int
