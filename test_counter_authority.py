"""Counter authority: serialised increments and shutdown."""
from __future__ import annotations

import threading

import pytest

from app.services.counter_authority import CounterAuthority, CounterUnavailableError


def test_starts_at_zero_and_counts_up_by_one() -> None:
    authority = CounterAuthority()
    assert authority.current() == 0
    assert authority.increment() == 1
    assert authority.increment() == 2
    assert authority.current() == 2


def test_current_does_not_mutate() -> None:
    authority = CounterAuthority()
    authority.increment()
    assert [authority.current() for _ in range(3)] == [1, 1, 1]


def test_negative_start_rejected() -> None:
    with pytest.raises(ValueError):
        CounterAuthority(start=-1)


def test_concurrent_increments_from_threads_are_not_lost() -> None:
    authority = CounterAuthority()
    seen: list[int] = []
    seen_lock = threading.Lock()

    def worker() -> None:
        for _ in range(250):
            value = authority.increment()
            with seen_lock:
                seen.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert authority.current() == 2000
    # every pre-value was observed by exactly one caller
    assert sorted(seen) == list(range(1, 2001))


def test_closed_authority_refuses_increments() -> None:
    authority = CounterAuthority()
    authority.increment()
    authority.close()

    assert authority.closed
    with pytest.raises(CounterUnavailableError):
        authority.increment()
    assert authority.current() == 1
