import asyncio
import threading

from services.ticker import AsyncTicker


def run(coro):
    return asyncio.run(coro)


def test_ticker_fires_repeatedly_until_stopped():
    async def scenario():
        ticker = AsyncTicker(interval=0.01)
        hits = []
        assert ticker.start("a", lambda: hits.append(1)) is True
        await asyncio.sleep(0.1)
        ticker.stop("a")
        # let a callback already handed to a worker thread finish
        await asyncio.sleep(0.02)
        seen = len(hits)
        await asyncio.sleep(0.05)
        return seen, len(hits)

    seen, after_stop = run(scenario())
    assert seen >= 3
    assert after_stop == seen


def test_start_on_active_key_does_not_duplicate():
    async def scenario():
        ticker = AsyncTicker(interval=0.02)
        hits = []
        ticker.start("a", lambda: hits.append("first"))
        assert ticker.start("a", lambda: hits.append("second")) is False
        await asyncio.sleep(0.07)
        ticker.stop_all()
        return hits

    hits = run(scenario())
    assert hits
    assert set(hits) == {"first"}


def test_failing_callback_keeps_ticking():
    async def scenario():
        ticker = AsyncTicker(interval=0.01)
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("boom")

        ticker.start("a", flaky)
        await asyncio.sleep(0.06)
        active = ticker.is_active("a")
        ticker.stop_all()
        return len(calls), active

    calls, active = run(scenario())
    assert calls >= 2
    assert active is True


def test_spawn_hook_receives_coroutine_function():
    spawned = []

    class Handle:
        cancelled = False

        def cancel(self):
            self.cancelled = True

    handle = Handle()

    def spawn(fn, *args):
        spawned.append((fn, args))
        return handle

    ticker = AsyncTicker(spawn=spawn, interval=1.0)
    ticker.start(("task", 1), lambda: None)
    assert len(spawned) == 1
    assert spawned[0][1][0] == ("task", 1)
    assert ticker.active_keys() == [("task", 1)]
    assert ticker.stop(("task", 1)) is True
    assert handle.cancelled
    assert ticker.stop(("task", 1)) is False


def test_callbacks_run_off_the_event_loop_thread():
    async def scenario():
        loop_thread = threading.get_ident()
        ticker = AsyncTicker(interval=0.01)
        threads = []
        ticker.start("a", lambda: threads.append(threading.get_ident()))
        await asyncio.sleep(0.05)
        ticker.stop_all()
        await asyncio.sleep(0.02)
        return loop_thread, threads

    loop_thread, threads = run(scenario())
    assert threads
    assert loop_thread not in threads
