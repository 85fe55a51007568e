"""Unit tests for the in-memory order store."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.orders.base import Order
from app.adapters.orders.in_memory import InMemoryOrderStore
from app.core.errors import ValidationAppError

START = datetime(2024, 1, 3, tzinfo=timezone.utc)


def _order(order_id: int, created_at: datetime, order_type: str = "shop_order") -> Order:
    return Order(order_id=order_id, order_type=order_type, created_at=created_at)


def test_counts_orders_created_at_or_after_start() -> None:
    store = InMemoryOrderStore(
        [
            _order(1, START - timedelta(seconds=1)),
            _order(2, START),
            _order(3, START + timedelta(hours=5)),
        ]
    )

    assert store.count(types=store.order_count_types(), created_after=START) == 2


def test_only_counting_types_are_included() -> None:
    store = InMemoryOrderStore(
        [
            _order(1, START),
            _order(2, START, order_type="shop_order_refund"),
            _order(3, START, order_type="subscription"),
        ]
    )

    assert store.order_count_types() == frozenset({"shop_order"})
    assert store.count(types=store.order_count_types(), created_after=START) == 1
    assert store.count(types={"shop_order", "subscription"}, created_after=START) == 2


def test_custom_count_types() -> None:
    store = InMemoryOrderStore(count_types=["shop_order", "subscription"])

    assert store.order_count_types() == frozenset({"shop_order", "subscription"})


def test_compares_instants_across_timezones() -> None:
    store = InMemoryOrderStore()
    # 19:30 on Jan 2nd in New York is 00:30 on Jan 3rd UTC
    store.add(_order(1, datetime(2024, 1, 3, 0, 30, tzinfo=timezone.utc).astimezone(
        timezone(timedelta(hours=-5))
    )))

    assert store.count(types={"shop_order"}, created_after=START) == 1


def test_naive_timestamps_are_rejected() -> None:
    store = InMemoryOrderStore()

    with pytest.raises(ValidationAppError) as exc_info:
        store.add(_order(1, datetime(2024, 1, 3, 12, 0)))

    assert exc_info.value.code == "order_naive_timestamp"


def test_clear() -> None:
    store = InMemoryOrderStore([_order(1, START)])

    store.clear()

    assert store.count(types={"shop_order"}, created_after=START) == 0
