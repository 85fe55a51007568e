"""Order (transaction) store adapters.

The limiter only ever asks a store to count orders; it never reads
individual records.
"""

from app.adapters.orders.base import AbstractOrderStore, Order
from app.adapters.orders.in_memory import InMemoryOrderStore

__all__ = ["AbstractOrderStore", "InMemoryOrderStore", "Order"]
