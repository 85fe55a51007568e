from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.auth import verify_api_key
from app.core.limiter import get_order_limiter
from app.schemas.limits import OrderLimitStatus, RegenerateResponse
from app.services.order_limiter import OrderLimiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Limits"], dependencies=[Depends(verify_api_key)])


@router.get("/limits", response_model=OrderLimitStatus)
def get_limit_status(
    limiter: Annotated[OrderLimiter, Depends(get_order_limiter)],
) -> OrderLimitStatus:
    """Report the order limit for the current interval.

    Returns:
        OrderLimitStatus: limit, remaining orders and interval boundaries.

    Raises:
        CountingAppError: 503 when the order count could not be regenerated.
    """
    status = limiter.get_status()

    return OrderLimitStatus(
        enabled=status.enabled,
        limit=status.limit,
        remaining=status.remaining,
        has_reached_limit=status.has_reached_limit,
        interval=status.window.interval.value,
        interval_start=status.window.start,
        next_interval_start=status.window.end,
        seconds_until_next_interval=status.seconds_until_next_interval,
    )


@router.post("/limits/regenerate", response_model=RegenerateResponse)
def regenerate_count(
    limiter: Annotated[OrderLimiter, Depends(get_order_limiter)],
) -> RegenerateResponse:
    """Recount qualifying orders and refresh the cached count."""
    status = limiter.get_status(regenerate=True)
    logger.info("limits.regenerated", extra={"count": status.order_count})

    return RegenerateResponse(
        count=status.order_count,
        interval_start=status.window.start,
        seconds_until_next_interval=status.seconds_until_next_interval,
    )
