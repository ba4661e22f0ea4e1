from __future__ import annotations

from app.core.cache import MISSING, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_entry_served_until_ttl_elapses():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=300, clock=clock)
    cache.set(("records", "u1"), [1, 2])

    clock.now += 299
    assert cache.get(("records", "u1")) == [1, 2]

    clock.now += 1
    assert cache.get(("records", "u1")) is MISSING


def test_absent_key_and_none_value_are_distinguished():
    cache = TTLCache(ttl_seconds=300, clock=FakeClock())
    assert cache.get("latest") is MISSING

    cache.set("latest", None)
    assert cache.get("latest") is None


def test_clear_drops_every_entry():
    cache = TTLCache(ttl_seconds=300, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    assert len(cache) == 2

    cache.clear()

    assert len(cache) == 0
    assert cache.get("a") is MISSING
