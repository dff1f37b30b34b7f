from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from leave_engine.config import get_settings
from leave_engine.exceptions import ForbiddenError, NotFoundError, ValidationError
from leave_engine.models.balance import LeaveBalance
from leave_engine.models.base import now_utc
from leave_engine.models.enums import AuditAction, AuditEntityType, UserRole
from leave_engine.schemas.balance import LeaveBalanceResponse
from leave_engine.services import store as balance_store
from leave_engine.services.audit import model_to_audit_dict, write_audit_log
from leave_engine.services.employee import get_employee_service

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.schemas.auth import AuthContext
    from leave_engine.schemas.balance import UpsertLeaveBalanceRequest
    from leave_engine.services.employee import EmployeeInfo

logger = logging.getLogger(__name__)

MANAGING_ROLES = frozenset({UserRole.ADMIN.value, UserRole.MANAGER.value})

# Stored ledger fields. Every one must be >= 0 at storage time.
LEDGER_FIELDS = (
    "vacation_days_total",
    "vacation_days_used",
    "sick_days_used",
    "special_leave_used",
    "compensation_hours",
    "compensation_used",
)
QUARTER_HOUR_FIELDS = ("compensation_hours", "compensation_used")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def ensure_can_manage_balances(auth: AuthContext) -> None:
    """Gate for every balance write and for the workforce year view."""
    if auth.role.upper() not in MANAGING_ROLES:
        raise ForbiddenError()


def ensure_can_view_balance(auth: AuthContext, employee_id: uuid.UUID) -> None:
    """Managers see everyone; employees only their own figures."""
    if auth.role.upper() not in MANAGING_ROLES and auth.user_id != employee_id:
        raise ForbiddenError("Access denied - balances of other employees require Admin or Manager")


def validate_year(year: Any) -> int:
    """Any integer is accepted; anything else is a malformed year."""
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError("year", f"year must be an integer, got {year!r}")
    return year


def validate_ledger_value(field: str, value: Any) -> float:
    """Reject negative, non-finite and non-numeric ledger inputs."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, f"{field} must be a number")
    if not math.isfinite(value):
        raise ValidationError(field, f"{field} must be a finite number")
    if value < 0:
        raise ValidationError(field, f"{field} must not be negative")
    if field.rsplit(".", 1)[-1] in QUARTER_HOUR_FIELDS and not float(value * 4).is_integer():
        raise ValidationError(field, f"{field} must be a multiple of 0.25 hours")
    return float(value)


def compute_remaining(total: float, used: float) -> float:
    return max(0.0, total - used)


def stamp_write(balance: LeaveBalance, auth: AuthContext) -> None:
    """Recompute derived fields and set the writer together with the write time."""
    balance.vacation_days_remaining = compute_remaining(balance.vacation_days_total, balance.vacation_days_used)
    balance.last_updated_by = auth.actor_label
    balance.updated_at = now_utc()


def default_balance(employee_id: uuid.UUID, year: int) -> LeaveBalanceResponse:
    """In-memory balance for an employee without a stored row. Never persisted."""
    total = float(get_settings().standard_vacation_days)
    return LeaveBalanceResponse(
        id=None,
        employee_id=employee_id,
        year=year,
        vacation_days_total=total,
        vacation_days_used=0,
        vacation_days_remaining=total,
        sick_days_used=0,
        special_leave_used=0,
        compensation_hours=0,
        compensation_used=0,
        compensation_balance=0,
        notes=None,
        last_updated_by=None,
        created_at=None,
        updated_at=None,
    )


def build_balance_response(balance: LeaveBalance) -> LeaveBalanceResponse:
    """Map a balance row to its response schema."""
    return LeaveBalanceResponse(
        id=balance.id,
        employee_id=balance.employee_id,
        year=balance.year,
        vacation_days_total=balance.vacation_days_total,
        vacation_days_used=balance.vacation_days_used,
        vacation_days_remaining=compute_remaining(balance.vacation_days_total, balance.vacation_days_used),
        sick_days_used=balance.sick_days_used,
        special_leave_used=balance.special_leave_used,
        compensation_hours=balance.compensation_hours,
        compensation_used=balance.compensation_used,
        compensation_balance=balance.compensation_hours - balance.compensation_used,
        notes=balance.notes,
        last_updated_by=balance.last_updated_by,
        created_at=balance.created_at,
        updated_at=balance.updated_at,
    )


async def get_employee_or_404(company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo:
    employee = await get_employee_service().get_employee(company_id, employee_id)
    if employee is None:
        raise NotFoundError(employee_id)
    return employee


# ---------------------------------------------------------------------------
# Write path: single-row upsert
# ---------------------------------------------------------------------------


def _validated_fields(payload: UpsertLeaveBalanceRequest) -> dict[str, Any]:
    """The keys the caller actually sent, range-checked."""
    supplied = payload.model_dump(exclude_unset=True, exclude={"employee_id", "year"})
    fields: dict[str, Any] = {}
    for name, value in supplied.items():
        if name in LEDGER_FIELDS:
            if value is None:
                raise ValidationError(name, f"{name} must be a number")
            fields[name] = validate_ledger_value(name, value)
        else:
            fields[name] = value
    return fields


async def _apply_upsert(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
    fields: dict[str, Any],
) -> tuple[LeaveBalance, bool]:
    balance = await balance_store.get_balance(session, auth.company_id, employee_id, year, for_update=True)
    created = balance is None
    before_json = None if balance is None else model_to_audit_dict(balance)

    if balance is None:
        balance = LeaveBalance(
            company_id=auth.company_id,
            employee_id=employee_id,
            year=year,
            vacation_days_total=float(get_settings().standard_vacation_days),
        )

    for name, value in fields.items():
        setattr(balance, name, value)
    stamp_write(balance, auth)

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=balance.id,
        action=AuditAction.CREATE if created else AuditAction.UPDATE,
        before_json=before_json,
        after_json=model_to_audit_dict(balance),
    )
    return await balance_store.save_balance(session, balance), created


async def upsert_balance(
    session: AsyncSession,
    auth: AuthContext,
    payload: UpsertLeaveBalanceRequest,
) -> LeaveBalanceResponse:
    """Create or overwrite the (employee, year) balance row.

    Flow:
    1. Check the acting user may manage balances
    2. Validate year and every supplied ledger field before touching the store
    3. Verify the employee exists in the acting user's company
    4. Lock the row if it exists; otherwise start from creation defaults
       (standard entitlement, everything else zero)
    5. Overwrite each supplied key, recompute remaining days, stamp writer
    6. Write audit log and commit

    A concurrent first insert of the same row loses the unique-key race; the
    loser re-reads the winner's row and applies its fields as an update.
    """
    ensure_can_manage_balances(auth)
    year = validate_year(payload.year)
    fields = _validated_fields(payload)
    await get_employee_or_404(auth.company_id, payload.employee_id)

    try:
        balance, created = await _apply_upsert(session, auth, payload.employee_id, year, fields)
    except balance_store.DuplicateBalanceError:
        logger.info("Concurrent insert for employee=%s year=%s; retrying as update", payload.employee_id, year)
        balance, created = await _apply_upsert(session, auth, payload.employee_id, year, fields)

    logger.info(
        "Leave balance %s for employee=%s year=%s by %s",
        "created" if created else "updated",
        payload.employee_id,
        year,
        auth.actor_label,
    )
    return build_balance_response(balance)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_balance(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    year: int,
) -> LeaveBalanceResponse:
    """Stored balance for one employee and year, or the synthesized default."""
    ensure_can_view_balance(auth, employee_id)
    year = validate_year(year)
    await get_employee_or_404(auth.company_id, employee_id)
    balance = await balance_store.get_balance(session, auth.company_id, employee_id, year)
    if balance is None:
        return default_balance(employee_id, year)
    return build_balance_response(balance)
