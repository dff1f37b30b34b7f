# ruff: noqa: TC003
"""Pending compensation-time requests, owned by the time-tracking system.

Only the attendance summary reads from here; pending hours are never part of
a stored balance row.
"""

from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable


@runtime_checkable
class CompensationRequestService(Protocol):
    """Interface for the time-tracking request queue."""

    async def get_pending_hours(self, company_id: uuid.UUID, employee_id: uuid.UUID, year: int) -> float:
        """Hours requested as time-for-time but not yet approved."""
        ...


class InMemoryCompensationRequestService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._pending: dict[tuple[uuid.UUID, uuid.UUID, int], float] = {}

    def record_pending(self, company_id: uuid.UUID, employee_id: uuid.UUID, year: int, hours: float) -> None:
        """Add a pending request of ``hours`` for testing."""
        key = (company_id, employee_id, year)
        self._pending[key] = self._pending.get(key, 0.0) + hours

    async def get_pending_hours(self, company_id: uuid.UUID, employee_id: uuid.UUID, year: int) -> float:
        return self._pending.get((company_id, employee_id, year), 0.0)


_compensation_service: CompensationRequestService = InMemoryCompensationRequestService()


def get_compensation_request_service() -> CompensationRequestService:
    return _compensation_service


def set_compensation_request_service(service: CompensationRequestService) -> None:
    """Override the service (for testing or production wiring)."""
    global _compensation_service
    _compensation_service = service
