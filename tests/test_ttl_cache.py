"""Unit tests for the in-memory InMemoryTTLCache."""

import threading

import pytest

from app.adapters.cache.in_memory import InMemoryTTLCache


def test_set_and_get_updates_hit_miss_counters(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)

    assert cache.get("missing") is None

    cache.set("key", 7, 10)

    assert cache.get("key") == 7

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


def test_entry_expires_exactly_at_ttl(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("key", 3, 5)

    fake_clock.advance(4)
    assert cache.get("key") == 3

    fake_clock.advance(1)
    assert cache.get("key") is None
    assert cache.stats()["evictions"] == 1


def test_expiry_uses_whole_second_write_time(fake_clock) -> None:
    fake_clock.current = 1_000.75
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("key", 1, 10)

    fake_clock.current = 1_009.99
    assert cache.get("key") == 1

    fake_clock.current = 1_010.0
    assert cache.get("key") is None


@pytest.mark.parametrize("ttl", [0, -30])
def test_non_positive_ttl_is_never_retrievable(fake_clock, ttl: int) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("key", 1, ttl)

    assert cache.get("key") is None


def test_zero_is_a_cacheable_value(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("count", 0, 60)

    assert cache.get("count") == 0


def test_overwrite_replaces_value_and_ttl(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("key", 1, 5)
    cache.set("key", 2, 100)

    fake_clock.advance(50)

    assert cache.get("key") == 2
    assert cache.stats()["entries"] == 1


def test_delete_removes_entry(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("key", 1, 60)

    cache.delete("key")
    cache.delete("never-set")

    assert cache.get("key") is None


def test_lru_eviction_removes_least_recently_used(fake_clock) -> None:
    cache = InMemoryTTLCache(max_entries=2, clock=fake_clock.time)
    cache.set("a", 1, 100)
    cache.set("b", 2, 100)

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == 1

    cache.set("c", 3, 100)

    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.get("b") is None


def test_clear_resets_state(fake_clock) -> None:
    cache = InMemoryTTLCache(clock=fake_clock.time)
    cache.set("a", 1, 10)
    cache.set("b", 2, 10)
    cache.get("a")

    cache.clear()

    stats = cache.stats()
    assert stats["entries"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0
    assert stats["evictions"] == 0


@pytest.mark.parametrize(
    ("name", "value"),
    [("", 1), ("key", None)],
)
def test_invalid_set_args(name: str, value) -> None:
    cache = InMemoryTTLCache()

    with pytest.raises(ValueError):
        cache.set(name, value, 10)


def test_invalid_max_entries() -> None:
    with pytest.raises(ValueError):
        InMemoryTTLCache(max_entries=0)


def test_concurrent_writers_to_one_entry_leave_a_single_value() -> None:
    cache = InMemoryTTLCache(max_entries=None)

    def _writer() -> None:
        cache.set("count", 42, 60)

    threads = [threading.Thread(target=_writer) for _ in range(25)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["entries"] == 1
    assert cache.get("count") == 42
