"""Vacation entitlement policy by employment type."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from leave_engine.models.enums import EmployeeType

logger = logging.getLogger(__name__)

FLEX_WORKER_RATIO = Decimal("0.6")


def _round_half_up(value: Decimal) -> float:
    # quantize needs every integer digit to fit in the context precision.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return float(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def resolve_vacation_entitlement(employee_type: str | None, base_days: float) -> float:
    """Return the effective vacation days for an employment type.

    PERMANENT keeps ``base_days``; FLEX_WORKER gets 60% rounded half-up to a
    whole day; FREELANCER gets nothing.

    Any other type, including None, is treated as PERMANENT. The personnel
    directory only offers the three known types, so this is a deliberate
    fallback pending product confirmation, not an inferred rule.
    """
    normalized = (employee_type or "").strip().upper()

    if normalized == EmployeeType.FREELANCER:
        return 0.0
    if normalized == EmployeeType.FLEX_WORKER:
        if not math.isfinite(base_days):
            return float(base_days)
        return _round_half_up(Decimal(str(base_days)) * FLEX_WORKER_RATIO)
    if normalized != EmployeeType.PERMANENT:
        logger.warning("Unknown employee type %r; applying PERMANENT entitlement", employee_type)
    return float(base_days)
