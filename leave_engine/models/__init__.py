from sqlmodel import SQLModel

from leave_engine.models.audit import AuditLog
from leave_engine.models.balance import LeaveBalance
from leave_engine.models.base import TimestampMixin, UUIDBase
from leave_engine.models.enums import (
    AuditAction,
    AuditEntityType,
    EmployeeType,
    UserRole,
)

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "EmployeeType",
    "LeaveBalance",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "UserRole",
]
