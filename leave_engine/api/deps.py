# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, Path

from leave_engine.exceptions import ForbiddenError
from leave_engine.schemas.auth import AuthContext


async def get_auth_context(
    x_company_id: uuid.UUID = Header(),
    x_user_id: uuid.UUID = Header(),
    x_user_name: str | None = Header(default=None),
    x_role: str = Header(default="EMPLOYEE"),
) -> AuthContext:
    """Extract the acting user from request headers set by the auth gateway."""
    return AuthContext(company_id=x_company_id, user_id=x_user_id, user_name=x_user_name, role=x_role.upper())


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def validate_company_scope(
    company_id: uuid.UUID = Path(),
    auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Ensure the path company_id matches the auth header company_id."""
    if company_id != auth.company_id:
        raise ForbiddenError("Company ID mismatch")
    return auth
