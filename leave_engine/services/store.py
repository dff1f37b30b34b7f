"""Balance record store: the only shared mutable resource of the engine.

One ``LeaveBalance`` row per (employee_id, year). Writes are last-writer-wins
at row granularity; there is no version column and no optimistic conflict
detection, so a single edit racing a bulk overwrite of the same row resolves
to whichever transaction commits last.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import col

from leave_engine.exceptions import StoreUnavailableError
from leave_engine.models.balance import LeaveBalance

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class DuplicateBalanceError(Exception):
    """A concurrent writer inserted the same (employee_id, year) row first."""


async def get_balance(
    session: AsyncSession,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
    *,
    for_update: bool = False,
) -> LeaveBalance | None:
    """Fetch the balance row, optionally with a FOR UPDATE row lock."""
    query = select(LeaveBalance).where(
        col(LeaveBalance.company_id) == company_id,
        col(LeaveBalance.employee_id) == employee_id,
        col(LeaveBalance.year) == year,
    )
    if for_update:
        query = query.with_for_update()
    try:
        result = await session.execute(query)
    except DBAPIError as exc:
        logger.exception("Balance read failed for employee=%s year=%s", employee_id, year)
        raise StoreUnavailableError() from exc
    return result.scalar_one_or_none()


async def list_balances_for_year(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int,
) -> dict[uuid.UUID, LeaveBalance]:
    """All stored rows of a company for one year, keyed by employee id."""
    try:
        result = await session.execute(
            select(LeaveBalance).where(
                col(LeaveBalance.company_id) == company_id,
                col(LeaveBalance.year) == year,
            )
        )
    except DBAPIError as exc:
        logger.exception("Balance listing failed for company=%s year=%s", company_id, year)
        raise StoreUnavailableError() from exc
    return {row.employee_id: row for row in result.scalars().all()}


async def save_balance(session: AsyncSession, balance: LeaveBalance) -> LeaveBalance:
    """Commit ``balance`` together with anything else pending in the session.

    Raises DuplicateBalanceError when the unique (employee_id, year) key was
    taken by a concurrent insert, and StoreUnavailableError for any other
    driver failure. The session is rolled back in both cases.
    """
    employee_id, year = balance.employee_id, balance.year
    session.add(balance)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateBalanceError(
            f"Balance for employee {employee_id} and year {year} was created concurrently"
        ) from exc
    except DBAPIError as exc:
        await session.rollback()
        logger.exception("Balance write failed for employee=%s year=%s", employee_id, year)
        raise StoreUnavailableError() from exc
    await session.refresh(balance)
    return balance
