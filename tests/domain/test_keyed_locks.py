from __future__ import annotations

import threading
import time

import pytest

from playledger.domain.locking import KeyedLocks


def test_same_key_is_mutually_exclusive() -> None:
    locks = KeyedLocks()
    inside = 0
    peak = 0
    guard = threading.Lock()

    def worker() -> None:
        nonlocal inside, peak
        with locks.hold("pair"):
            with guard:
                inside += 1
                peak = max(peak, inside)
            time.sleep(0.01)
            with guard:
                inside -= 1

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert peak == 1
    assert len(locks) == 0


def test_different_keys_do_not_block_each_other() -> None:
    locks = KeyedLocks()
    entered = threading.Event()

    def other() -> None:
        with locks.hold("b"):
            entered.set()

    with locks.hold("a"):
        thread = threading.Thread(target=other)
        thread.start()
        assert entered.wait(timeout=2)
        thread.join()


def test_slot_is_released_when_body_raises() -> None:
    locks = KeyedLocks()

    with pytest.raises(RuntimeError), locks.hold("pair"):
        raise RuntimeError("boom")

    assert len(locks) == 0
    with locks.hold("pair"):
        assert len(locks) == 1
