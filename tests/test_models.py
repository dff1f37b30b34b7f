from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import IntegrityError

from leave_engine.models import AuditLog, LeaveBalance, SQLModel
from leave_engine.models.enums import AuditAction, AuditEntityType, EmployeeType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

EXPECTED_TABLES = {"audit_log", "leave_balance"}


def test_all_tables_registered() -> None:
    table_names = set(SQLModel.metadata.tables.keys())
    assert EXPECTED_TABLES.issubset(table_names)


def test_leave_balance_defaults() -> None:
    balance = LeaveBalance(company_id=uuid.uuid4(), employee_id=uuid.uuid4(), year=2025)
    assert balance.id is not None
    assert balance.vacation_days_total == 0
    assert balance.vacation_days_used == 0
    assert balance.vacation_days_remaining == 0
    assert balance.sick_days_used == 0
    assert balance.special_leave_used == 0
    assert balance.compensation_hours == 0
    assert balance.compensation_used == 0
    assert balance.notes is None
    assert balance.last_updated_by is None
    assert balance.created_at is not None
    assert balance.updated_at is not None


def test_leave_balance_unique_per_employee_year() -> None:
    table = SQLModel.metadata.tables["leave_balance"]
    unique_columns = {
        tuple(c.name for c in constraint.columns)
        for constraint in table.constraints
        if constraint.__class__.__name__ == "UniqueConstraint"
    }
    assert ("employee_id", "year") in unique_columns


async def test_duplicate_row_rejected_by_database(db_session: AsyncSession) -> None:
    company_id, employee_id = uuid.uuid4(), uuid.uuid4()
    db_session.add(LeaveBalance(company_id=company_id, employee_id=employee_id, year=2025))
    await db_session.commit()

    db_session.add(LeaveBalance(company_id=company_id, employee_id=employee_id, year=2025))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


def test_audit_log_instantiation() -> None:
    log = AuditLog(
        company_id=uuid.uuid4(),
        actor_id=uuid.uuid4(),
        entity_type=AuditEntityType.LEAVE_BALANCE,
        entity_id=uuid.uuid4(),
        action=AuditAction.BULK_INITIALIZE,
    )
    assert log.before_json is None
    assert log.after_json is None
    assert log.actor_name is None


def test_employee_type_values() -> None:
    assert {t.value for t in EmployeeType} == {"PERMANENT", "FREELANCER", "FLEX_WORKER"}
