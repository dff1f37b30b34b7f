# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from leave_engine.api.deps import AuthDep, validate_company_scope
from leave_engine.exceptions import NotFoundError
from leave_engine.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from leave_engine.services.balance import ensure_can_manage_balances
from leave_engine.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(
    prefix="/companies/{company_id}/employees",
    tags=["employees"],
    dependencies=[Depends(validate_company_scope)],
)


def _build_employee_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        company_id=employee.company_id,
        name=employee.name,
        email=employee.email,
        employee_type=employee.employee_type,
        role=employee.role,
        archived=employee.archived,
    )


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def upsert_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    auth: AuthDep,
) -> EmployeeResponse:
    """Create or update an employee in the stub directory (admin or manager)."""
    ensure_can_manage_balances(auth)
    svc = get_employee_service()
    employee = EmployeeInfo(
        id=employee_id,
        company_id=company_id,
        name=payload.name,
        email=payload.email,
        employee_type=payload.employee_type.upper(),
        role=payload.role,
        archived=payload.archived,
    )
    svc.seed(employee)  # ty: ignore[unresolved-attribute]
    return _build_employee_response(employee)


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def get_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get employee info from the directory."""
    employee = await get_employee_service().get_employee(company_id, employee_id)
    if employee is None:
        raise NotFoundError(employee_id)
    return _build_employee_response(employee)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    company_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeListResponse:
    """List all employees for a company, archived ones included."""
    employees = await get_employee_service().list_employees(company_id)
    items = [_build_employee_response(e) for e in sorted(employees, key=lambda e: (e.name.casefold(), str(e.id)))]
    return EmployeeListResponse(items=items, total=len(items))
