from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

if TYPE_CHECKING:
    from leave_engine.schemas.balance import BulkFailure, BulkResultItem


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    field: str | None = None
    employee_id: uuid.UUID | None = None
    year: int | None = None
    employees_processed: int | None = None
    results: list[dict[str, Any]] | None = None
    failures: list[dict[str, Any]] | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def extra(self) -> dict[str, Any]:
        """Structured fields merged into the error response."""
        return {}


class NotFoundError(AppError):
    """The referenced employee does not exist in the acting user's company."""

    def __init__(self, employee_id: uuid.UUID, message: str | None = None) -> None:
        self.employee_id = employee_id
        super().__init__(message or f"Employee {employee_id} not found", status_code=status.HTTP_404_NOT_FOUND)

    def extra(self) -> dict[str, Any]:
        return {"employee_id": self.employee_id}


class ValidationError(AppError):
    """Input rejected by the engine; never worth retrying."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

    def extra(self) -> dict[str, Any]:
        return {"field": self.field}


class ForbiddenError(AppError):
    def __init__(self, message: str = "Access denied - Admin or Manager only") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class BulkInProgressError(AppError):
    """Another bulk initialization already holds the lock for this year."""

    def __init__(self, year: int) -> None:
        self.year = year
        super().__init__(
            f"Bulk initialization for {year} is already running",
            status_code=status.HTTP_409_CONFLICT,
        )

    def extra(self) -> dict[str, Any]:
        return {"year": self.year}


class StoreUnavailableError(AppError):
    """Transient persistence failure. Single-row writes are safe to retry."""

    def __init__(self, message: str = "Balance store unavailable") -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


class PartialFailureError(AppError):
    """Bulk initialization committed some rows but failed for others.

    Rows for employees not listed in ``failures`` are committed and stay
    committed. Re-run for the failed subset once the cause is resolved.
    """

    def __init__(
        self,
        year: int,
        results: list[BulkResultItem],
        failures: list[BulkFailure],
    ) -> None:
        self.year = year
        self.results = results
        self.failures = failures
        super().__init__(
            f"Leave balances initialized for {len(results)} employees, {len(failures)} failed",
            status_code=status.HTTP_207_MULTI_STATUS,
        )

    @property
    def employees_processed(self) -> int:
        return len(self.results)

    def extra(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "employees_processed": self.employees_processed,
            "results": [r.model_dump(mode="json") for r in self.results],
            "failures": [f.model_dump(mode="json") for f in self.failures],
        }


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            **exc.extra(),
        ).model_dump(mode="json", exclude_none=True),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = None
    if errors:
        field = ".".join(str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path"))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(errors),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            field=field or None,
        ).model_dump(mode="json", exclude_none=True),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
