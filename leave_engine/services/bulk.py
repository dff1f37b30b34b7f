"""Workforce-wide bulk initialization of leave balances for one year.

DESTRUCTIVE: every roster employee's row for the year is fully overwritten.
Recorded usage (vacation, sick, special leave, compensation) is reset to zero
and notes are cleared. The previous values survive only in the audit log.

Each employee row is its own transaction. A failure for one employee does not
stop the others, and rows already written stay committed if the run fails or
is cancelled midway; there is no batch-wide rollback.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from leave_engine.exceptions import AppError, BulkInProgressError, PartialFailureError
from leave_engine.models.balance import LeaveBalance
from leave_engine.models.enums import AuditAction, AuditEntityType
from leave_engine.schemas.balance import BulkFailure, BulkInitializeResponse, BulkResultItem
from leave_engine.services import store as balance_store
from leave_engine.services.audit import model_to_audit_dict, write_audit_log
from leave_engine.services.balance import (
    ensure_can_manage_balances,
    stamp_write,
    validate_ledger_value,
    validate_year,
)
from leave_engine.services.employee import list_roster
from leave_engine.services.policy import resolve_vacation_entitlement

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.schemas.auth import AuthContext
    from leave_engine.schemas.balance import BulkInitializeRequest
    from leave_engine.services.employee import EmployeeInfo

logger = logging.getLogger(__name__)

# Single writer per (company, year) within this process. Running bulk
# initialization from several processes at once needs external exclusion.
_year_locks: dict[tuple[uuid.UUID, int], asyncio.Lock] = {}


def _get_year_lock(company_id: uuid.UUID, year: int) -> asyncio.Lock:
    key = (company_id, year)
    lock = _year_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _year_locks[key] = lock
    return lock


async def _overwrite_employee_row(
    session: AsyncSession,
    auth: AuthContext,
    employee: EmployeeInfo,
    year: int,
    vacation_days_total: float,
    compensation_hours: float,
) -> LeaveBalance:
    """Replace one employee's row for the year and commit it."""
    balance = await balance_store.get_balance(session, auth.company_id, employee.id, year, for_update=True)
    before_json = None if balance is None else model_to_audit_dict(balance)

    if balance is None:
        balance = LeaveBalance(company_id=auth.company_id, employee_id=employee.id, year=year)

    balance.vacation_days_total = vacation_days_total
    balance.vacation_days_used = 0
    balance.sick_days_used = 0
    balance.special_leave_used = 0
    balance.compensation_hours = compensation_hours
    balance.compensation_used = 0
    balance.notes = None
    stamp_write(balance, auth)

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=balance.id,
        action=AuditAction.BULK_INITIALIZE,
        before_json=before_json,
        after_json=model_to_audit_dict(balance),
    )
    return await balance_store.save_balance(session, balance)


async def _initialize_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee: EmployeeInfo,
    year: int,
    base_days: float,
    compensation_hours: float,
) -> float:
    """Resolve one employee's entitlement and overwrite their row. Returns the days assigned.

    A row inserted concurrently after our read makes the insert collide; the
    row is then re-read and overwritten, so the bulk write still lands last.
    """
    entitlement = resolve_vacation_entitlement(employee.employee_type, base_days)
    try:
        await _overwrite_employee_row(session, auth, employee, year, entitlement, compensation_hours)
    except balance_store.DuplicateBalanceError:
        logger.info("Concurrent insert for employee=%s year=%s; retrying bulk overwrite", employee.id, year)
        await _overwrite_employee_row(session, auth, employee, year, entitlement, compensation_hours)
    return entitlement


def _failure_detail(exc: Exception) -> str:
    if isinstance(exc, AppError):
        return exc.message
    if isinstance(exc, balance_store.DuplicateBalanceError):
        return str(exc)
    return "Unexpected error while initializing the balance row"


async def bulk_initialize(
    session: AsyncSession,
    auth: AuthContext,
    payload: BulkInitializeRequest,
) -> BulkInitializeResponse:
    """Apply the default policy to every roster employee for ``payload.year``.

    Vacation entitlement is resolved per employment type from
    ``default_settings.vacation_days_total``; compensation hours are the same
    for everyone. Raises PartialFailureError, carrying both the committed
    results and the failed employees, when any row could not be written.
    """
    ensure_can_manage_balances(auth)
    year = validate_year(payload.year)
    base_days = validate_ledger_value(
        "default_settings.vacation_days_total", payload.default_settings.vacation_days_total
    )
    compensation_hours = validate_ledger_value(
        "default_settings.compensation_hours", payload.default_settings.compensation_hours
    )

    lock = _get_year_lock(auth.company_id, year)
    if lock.locked():
        raise BulkInProgressError(year)

    try:
        async with lock:
            roster = await list_roster(auth.company_id)
            results: list[BulkResultItem] = []
            failures: list[BulkFailure] = []

            for employee in roster:
                try:
                    entitlement = await _initialize_employee(
                        session, auth, employee, year, base_days, compensation_hours
                    )
                except Exception as exc:
                    await session.rollback()
                    logger.exception("Bulk initialization failed for employee=%s year=%s", employee.id, year)
                    failures.append(
                        BulkFailure(
                            employee_id=employee.id,
                            employee_name=employee.name,
                            error=type(exc).__name__,
                            detail=_failure_detail(exc),
                        )
                    )
                    continue

                results.append(
                    BulkResultItem(
                        employee_id=employee.id,
                        employee_name=employee.name,
                        vacation_days_assigned=entitlement,
                    )
                )
    finally:
        # No run waits on the lock, so a released lock has no other users.
        if not lock.locked():
            _year_locks.pop((auth.company_id, year), None)

    logger.info(
        "Bulk initialization for company=%s year=%s by %s: processed=%d failed=%d",
        auth.company_id,
        year,
        auth.actor_label,
        len(results),
        len(failures),
    )

    if failures:
        raise PartialFailureError(year, results, failures)
    return BulkInitializeResponse(year=year, employees_processed=len(results), results=results)
