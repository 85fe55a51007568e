"""Order store interface.

The limiter treats orders purely as a count: it asks the store how many
orders of the counting types were created at or after an instant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

# Order type that counts toward the limit by default (refunds don't)
DEFAULT_ORDER_COUNT_TYPES: frozenset[str] = frozenset({"shop_order"})


@dataclass(frozen=True)
class Order:
    """Minimal order record as seen by the in-memory store.

    Attributes:
        order_id: Store-assigned identifier.
        order_type: Type classification (e.g., "shop_order", "shop_order_refund").
        created_at: Timezone-aware creation timestamp.
    """

    order_id: int
    order_type: str
    created_at: datetime


class AbstractOrderStore(ABC):
    """Interface for counting orders."""

    @abstractmethod
    def order_count_types(self) -> frozenset[str]:
        """Return the order types that count toward the limit."""
        raise NotImplementedError

    @abstractmethod
    def count(self, *, types: Iterable[str], created_after: datetime) -> int:
        """Count orders of ``types`` created at or after ``created_after``.

        Args:
            types: Order types to include.
            created_after: Inclusive lower bound (timezone-aware).

        Returns:
            Non-negative number of matching orders.

        Raises:
            CountingAppError: If the store cannot be queried.
        """
        raise NotImplementedError
