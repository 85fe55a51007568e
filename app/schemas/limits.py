"""Pydantic schemas for order limit responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class OrderLimitStatus(BaseModel):
    """Current state of the order limit."""

    enabled: bool = Field(..., description="Whether order limiting is enabled.")
    limit: int = Field(
        ..., description="Orders permitted per interval, or -1 when there is no limit."
    )
    remaining: int = Field(
        ...,
        description="Orders that may still be accepted this interval, or -1 when there is no limit.",
    )
    has_reached_limit: bool = Field(
        ..., description="True when no further orders may be accepted this interval."
    )
    interval: str = Field(..., description="Limiting interval: daily, weekly or monthly.")
    interval_start: datetime = Field(
        ..., description="Start of the current interval in the store timezone."
    )
    next_interval_start: datetime = Field(
        ..., description="Instant at which the next interval begins."
    )
    seconds_until_next_interval: int = Field(
        ..., ge=0, description="Whole seconds until the limit resets."
    )


class RegenerateResponse(BaseModel):
    """Result of forcing the interval order count to be recomputed."""

    count: int = Field(..., ge=0, description="Qualifying orders in the current interval.")
    interval_start: datetime = Field(..., description="Start of the counted interval.")
    seconds_until_next_interval: int = Field(
        ..., ge=0, description="Lifetime of the cached count in seconds."
    )
