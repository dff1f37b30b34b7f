import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leave_engine.config import get_settings
from leave_engine.db import SessionDep
from leave_engine.models.balance import LeaveBalance

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

StoreStatus = Literal["ok", "degraded", "error"]


class HealthResponse(BaseModel):
    """Service identity plus reachability of the balance store."""

    status: StoreStatus
    version: str
    environment: str


async def _probe_balance_store(session: AsyncSession) -> StoreStatus:
    """Read one row id from ``leave_balance``; fails if the table or database is missing."""
    try:
        await session.execute(select(LeaveBalance.id).limit(1))
    except Exception:
        logger.exception("Health check: leave_balance table is not readable")
        return "degraded"
    return "ok"


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Always 200; ``status`` reports whether the balance store is readable."""
    settings = get_settings()
    return HealthResponse(
        status=await _probe_balance_store(session),
        version=settings.app_version,
        environment=settings.environment,
    )
