# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from leave_engine.models.enums import EmployeeType, UserRole

# Roles whose members carry a leave balance.
ROSTER_ROLES = frozenset({UserRole.EMPLOYEE.value, UserRole.MANAGER.value})


class EmployeeInfo(BaseModel):
    """Employee record from the personnel directory."""

    id: uuid.UUID
    company_id: uuid.UUID
    name: str
    email: str
    employee_type: str = EmployeeType.PERMANENT.value  # free string; see policy fallback
    role: str = UserRole.EMPLOYEE.value
    archived: bool = False


@runtime_checkable
class EmployeeService(Protocol):
    """Interface for the personnel directory."""

    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        ...

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        """List all employees for a company."""
        ...


class InMemoryEmployeeService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._employees: dict[tuple[uuid.UUID, uuid.UUID], EmployeeInfo] = {}

    def seed(self, employee: EmployeeInfo) -> None:
        """Seed an employee for testing."""
        self._employees[(employee.company_id, employee.id)] = employee

    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        return self._employees.get((company_id, employee_id))

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        """List all employees for a company."""
        return [e for e in self._employees.values() if e.company_id == company_id]


_employee_service: EmployeeService = InMemoryEmployeeService()


def get_employee_service() -> EmployeeService:
    """FastAPI dependency for the Employee Service."""
    return _employee_service


def set_employee_service(service: EmployeeService) -> None:
    """Override the service (for testing or production wiring)."""
    global _employee_service
    _employee_service = service


async def list_roster(company_id: uuid.UUID) -> list[EmployeeInfo]:
    """Active employees that carry a leave balance, ordered by name then id."""
    employees = await get_employee_service().list_employees(company_id)
    roster = [e for e in employees if not e.archived and e.role.upper() in ROSTER_ROLES]
    return sorted(roster, key=lambda e: (e.name.casefold(), str(e.id)))
