import asyncio

from charity_events.utils.timers import Debouncer, PeriodicTimer, Throttle

from .helpers import run


def test_debouncer_delivers_only_last_call():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.02, calls.append)
        debouncer.schedule('p')
        debouncer.schedule('pa')
        debouncer.schedule('park')
        assert debouncer.pending
        await asyncio.sleep(0.06)
        assert not debouncer.pending

    run(scenario())
    assert calls == ['park']


def test_debouncer_cancel_drops_pending_call():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.02, calls.append)
        debouncer.schedule('x')
        debouncer.cancel()
        await asyncio.sleep(0.05)

    run(scenario())
    assert calls == []


def test_debouncer_flush_fires_immediately():
    calls = []

    async def scenario():
        debouncer = Debouncer(10, calls.append)
        debouncer.schedule('now')
        debouncer.flush()
        assert not debouncer.pending

    run(scenario())
    assert calls == ['now']


def test_debouncer_runs_coroutine_callbacks():
    calls = []

    async def callback(value):
        calls.append(value)

    async def scenario():
        debouncer = Debouncer(0.01, callback)
        debouncer.schedule(1)
        await asyncio.sleep(0.05)

    run(scenario())
    assert calls == [1]


def test_throttle_drops_calls_within_interval():
    now = [0.0]
    calls = []
    throttle = Throttle(1.0, calls.append, clock=lambda: now[0])

    assert throttle('a') is True
    now[0] = 0.5
    assert throttle('b') is False
    now[0] = 1.0
    assert throttle('c') is True
    assert calls == ['a', 'c']


def test_periodic_timer_ticks_until_cancelled():
    ticks = []

    async def scenario():
        timer = PeriodicTimer(0.01, lambda: ticks.append(1))
        timer.start()
        assert timer.running
        await asyncio.sleep(0.055)
        timer.cancel()
        count = len(ticks)
        await asyncio.sleep(0.03)
        return count

    count = run(scenario())
    assert count >= 2
    assert len(ticks) == count


def test_periodic_timer_survives_failing_callback():
    ticks = []

    def callback():
        ticks.append(1)
        raise RuntimeError('boom')

    async def scenario():
        timer = PeriodicTimer(0.01, callback)
        timer.start()
        await asyncio.sleep(0.045)
        timer.cancel()

    run(scenario())
    assert len(ticks) >= 2
