"""In-memory order store (single process, for development and tests)."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Iterable

from app.adapters.orders.base import DEFAULT_ORDER_COUNT_TYPES, AbstractOrderStore, Order
from app.core.errors import ValidationAppError


class InMemoryOrderStore(AbstractOrderStore):
    """Thread-safe list of orders with a counting query."""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        *,
        count_types: Iterable[str] = DEFAULT_ORDER_COUNT_TYPES,
    ) -> None:
        self._lock = threading.RLock()
        self._orders: list[Order] = []
        self._count_types = frozenset(count_types)
        for order in orders:
            self.add(order)

    def order_count_types(self) -> frozenset[str]:
        return self._count_types

    def add(self, order: Order) -> None:
        """Record an order.

        Raises:
            ValidationAppError: If ``created_at`` is naive.
        """
        if order.created_at.tzinfo is None:
            raise ValidationAppError(
                code="order_naive_timestamp",
                message="Order created_at must be timezone-aware",
                details={"context": {"order_id": order.order_id}},
            )
        with self._lock:
            self._orders.append(order)

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()

    def count(self, *, types: Iterable[str], created_after: datetime) -> int:
        wanted = frozenset(types)
        with self._lock:
            return sum(
                1
                for order in self._orders
                if order.order_type in wanted and order.created_at >= created_after
            )
