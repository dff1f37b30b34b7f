from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leave_engine.models.audit import AuditLog
from leave_engine.models.enums import AuditEntityType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leave_engine.models.enums import AuditAction
    from leave_engine.schemas.auth import AuthContext


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        else:
            data[key] = value
    return data


async def write_audit_log(
    session: AsyncSession,
    *,
    auth: AuthContext,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Write an immutable audit log entry within the caller's transaction."""
    entry = AuditLog(
        company_id=auth.company_id,
        actor_id=auth.user_id,
        actor_name=auth.user_name,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


async def list_entity_history(
    session: AsyncSession,
    company_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[AuditLog], int]:
    """Audit entries for one entity, newest first, with the total count."""
    filters = [
        col(AuditLog.company_id) == company_id,
        col(AuditLog.entity_type) == entity_type.value,
        col(AuditLog.entity_id) == entity_id,
    ]
    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog)
        .where(*filters)
        .order_by(col(AuditLog.created_at).desc(), col(AuditLog.id))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total
