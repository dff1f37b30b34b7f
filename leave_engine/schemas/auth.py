# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class AuthContext(BaseModel):
    """Acting user, passed explicitly into every engine write."""

    company_id: uuid.UUID
    user_id: uuid.UUID
    user_name: str | None = None
    role: str = "EMPLOYEE"

    @property
    def actor_label(self) -> str:
        """Identity recorded as ``last_updated_by``."""
        return self.user_name or str(self.user_id)
