from __future__ import annotations

import enum


class EmployeeType(enum.StrEnum):
    """Employment type; drives the vacation entitlement policy."""

    PERMANENT = "PERMANENT"
    FREELANCER = "FREELANCER"
    FLEX_WORKER = "FLEX_WORKER"


class UserRole(enum.StrEnum):
    """Roles known to the surrounding product."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    LEAVE_BALANCE = "LEAVE_BALANCE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    BULK_INITIALIZE = "BULK_INITIALIZE"
