# tests/test_scheduler.py
import asyncio

import pytest

from trick_table.errors import ConfigurationError
from trick_table.scheduler import AsyncioScheduler, ManualScheduler, Scheduler


def test_manual_scheduler_fires_in_time_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2.0, lambda: fired.append("b"))
    scheduler.call_later(1.0, lambda: fired.append("a"))
    scheduler.call_later(2.0, lambda: fired.append("c"))

    assert scheduler.pending == 3
    assert scheduler.advance(1.5) == 1
    assert fired == ["a"]
    assert scheduler.now == 1.5

    scheduler.advance(1.0)
    assert fired == ["a", "b", "c"]
    assert scheduler.pending == 0


def test_manual_scheduler_cancel():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.call_later(1.0, lambda: fired.append("x"))
    handle.cancel()
    handle.cancel()

    assert scheduler.pending == 0
    assert scheduler.run_next() is False
    assert fired == []


def test_manual_scheduler_runs_chained_callbacks():
    scheduler = ManualScheduler()
    fired = []

    def chain(n):
        fired.append(n)
        if n < 3:
            scheduler.call_later(1.0, lambda: chain(n + 1))

    scheduler.call_later(1.0, lambda: chain(1))
    assert scheduler.advance(2.0) == 2
    assert fired == [1, 2]
    assert scheduler.run_until_idle() == 1
    assert fired == [1, 2, 3]
    assert scheduler.now == 3.0


def test_manual_scheduler_guards_endless_chains():
    scheduler = ManualScheduler()

    def forever():
        scheduler.call_later(0.0, forever)

    scheduler.call_later(0.0, forever)
    with pytest.raises(RuntimeError):
        scheduler.run_until_idle(max_steps=50)


def test_manual_scheduler_rejects_negative_delay():
    with pytest.raises(ValueError):
        ManualScheduler().call_later(-1.0, lambda: None)


def test_asyncio_scheduler_uses_running_loop():
    fired = []

    async def main():
        scheduler = AsyncioScheduler()
        scheduler.call_later(0.01, lambda: fired.append("late"))
        cancelled = scheduler.call_later(0.01, lambda: fired.append("never"))
        cancelled.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(main())
    assert fired == ["late"]


def test_check_ready():
    ManualScheduler().check_ready()

    # No running loop outside asyncio.run
    with pytest.raises(ConfigurationError):
        AsyncioScheduler().check_ready()

    loop = asyncio.new_event_loop()
    scheduler = AsyncioScheduler(loop)
    scheduler.check_ready()
    loop.close()
    with pytest.raises(ConfigurationError):
        scheduler.check_ready()


def test_schedulers_satisfy_protocol():
    assert isinstance(ManualScheduler(), Scheduler)
    assert isinstance(AsyncioScheduler(), Scheduler)
