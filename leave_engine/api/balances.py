# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from leave_engine.api.deps import AuthDep, validate_company_scope
from leave_engine.db import SessionDep
from leave_engine.schemas.balance import (
    BalanceHistoryResponse,
    BulkInitializeRequest,
    BulkInitializeResponse,
    LeaveBalanceResponse,
    LeaveSummaryResponse,
    UpsertLeaveBalanceRequest,
    YearViewResponse,
)
from leave_engine.services import balance as balance_service
from leave_engine.services import bulk as bulk_service
from leave_engine.services import view as view_service

company_balances_router = APIRouter(
    prefix="/companies/{company_id}/leave-balances",
    tags=["leave-balances"],
    dependencies=[Depends(validate_company_scope)],
)

employee_balances_router = APIRouter(
    prefix="/companies/{company_id}/employees/{employee_id}/leave-balances",
    tags=["leave-balances"],
    dependencies=[Depends(validate_company_scope)],
)


@company_balances_router.get("", response_model=YearViewResponse)
async def get_year_view(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
) -> YearViewResponse:
    """Every employee with their balance for the year (current year by default)."""
    return await view_service.build_year_view(session, auth, year if year is not None else date.today().year)


@company_balances_router.post("", response_model=LeaveBalanceResponse)
async def upsert_balance(
    payload: UpsertLeaveBalanceRequest,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveBalanceResponse:
    """Create or overwrite one employee's balance for a year (admin or manager)."""
    return await balance_service.upsert_balance(session, auth, payload)


@company_balances_router.post(
    "/bulk",
    response_model=BulkInitializeResponse,
    responses={status.HTTP_207_MULTI_STATUS: {"description": "Some employees failed; see failures"}},
)
async def bulk_initialize(
    payload: BulkInitializeRequest,
    session: SessionDep,
    auth: AuthDep,
) -> BulkInitializeResponse:
    """Overwrite every employee's balance for a year with the default policy (admin or manager)."""
    return await bulk_service.bulk_initialize(session, auth, payload)


@employee_balances_router.get("/{year}", response_model=LeaveBalanceResponse)
async def get_employee_balance(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveBalanceResponse:
    """Balance for one employee and year, synthesized if never written."""
    return await balance_service.get_balance(session, auth, employee_id, year)


@employee_balances_router.get("/{year}/summary", response_model=LeaveSummaryResponse)
async def get_employee_leave_summary(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveSummaryResponse:
    """Balance figures shaped for the attendance overview."""
    return await view_service.get_leave_summary(session, auth, employee_id, year)


@employee_balances_router.get("/{year}/history", response_model=BalanceHistoryResponse)
async def get_employee_balance_history(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> BalanceHistoryResponse:
    """Audit trail of one balance row, newest first."""
    return await view_service.list_balance_history(session, auth, employee_id, year, offset, limit)
