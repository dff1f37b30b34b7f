"""Read-side aggregation of leave balances.

Nothing here writes to the store. Employees without a row for the requested
year get a synthesized default balance that exists only in the response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from leave_engine.models.enums import AuditEntityType
from leave_engine.schemas.balance import (
    BalanceHistoryEntry,
    BalanceHistoryResponse,
    CompensationTimeSummary,
    EmployeeBalanceView,
    LeaveSummaryResponse,
    SickDaysSummary,
    SpecialLeaveSummary,
    VacationDaysSummary,
    YearViewResponse,
)
from leave_engine.services import store as balance_store
from leave_engine.services.audit import list_entity_history
from leave_engine.services.balance import (
    build_balance_response,
    default_balance,
    ensure_can_manage_balances,
    ensure_can_view_balance,
    get_employee_or_404,
    validate_year,
)
from leave_engine.services.compensation import get_compensation_request_service
from leave_engine.services.employee import list_roster

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.schemas.auth import AuthContext


async def build_year_view(
    session: AsyncSession,
    auth: AuthContext,
    year: int,
) -> YearViewResponse:
    """Join every roster employee with their balance for ``year``.

    Order follows the roster (name, then id), so repeated calls over the same
    data return the same sequence.
    """
    ensure_can_manage_balances(auth)
    year = validate_year(year)

    roster = await list_roster(auth.company_id)
    stored = await balance_store.list_balances_for_year(session, auth.company_id, year)

    employees: list[EmployeeBalanceView] = []
    for employee in roster:
        balance = stored.get(employee.id)
        employees.append(
            EmployeeBalanceView(
                id=employee.id,
                name=employee.name,
                email=employee.email,
                employee_type=employee.employee_type,
                leave_balance=(
                    build_balance_response(balance) if balance is not None else default_balance(employee.id, year)
                ),
            )
        )

    return YearViewResponse(year=year, total_employees=len(employees), employees=employees)


async def get_leave_summary(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
) -> LeaveSummaryResponse:
    """Balance figures for embedding in an employee's attendance payload.

    ``compensation_time.pending`` comes from the time-tracking request queue,
    not from the balance row.
    """
    ensure_can_view_balance(auth, employee_id)
    year = validate_year(year)
    await get_employee_or_404(auth.company_id, employee_id)

    row = await balance_store.get_balance(session, auth.company_id, employee_id, year)
    balance = build_balance_response(row) if row is not None else default_balance(employee_id, year)
    pending = await get_compensation_request_service().get_pending_hours(auth.company_id, employee_id, year)

    return LeaveSummaryResponse(
        employee_id=employee_id,
        year=year,
        vacation_days=VacationDaysSummary(
            entitled=balance.vacation_days_total,
            used=balance.vacation_days_used,
            remaining=balance.vacation_days_remaining,
        ),
        sick_days=SickDaysSummary(used=balance.sick_days_used),
        special_leave=SpecialLeaveSummary(used=balance.special_leave_used),
        compensation_time=CompensationTimeSummary(
            available=balance.compensation_hours,
            used=balance.compensation_used,
            pending=pending,
            balance=balance.compensation_balance,
        ),
    )


async def list_balance_history(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
    offset: int = 0,
    limit: int = 50,
) -> BalanceHistoryResponse:
    """Audit trail for one balance row, newest first. Empty if never written."""
    ensure_can_view_balance(auth, employee_id)
    year = validate_year(year)
    await get_employee_or_404(auth.company_id, employee_id)

    row = await balance_store.get_balance(session, auth.company_id, employee_id, year)
    if row is None:
        return BalanceHistoryResponse(items=[], total=0)

    entries, total = await list_entity_history(
        session, auth.company_id, AuditEntityType.LEAVE_BALANCE, row.id, offset, limit
    )
    return BalanceHistoryResponse(
        items=[
            BalanceHistoryEntry(
                id=e.id,
                actor_id=e.actor_id,
                actor_name=e.actor_name,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )
