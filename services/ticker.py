"""Once-per-second callbacks keyed by owner (a task id, the countdown)."""
from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Coroutine, Dict, Hashable, List, Optional, Protocol

from core.logs import get_logger
from core.settings import TICKER

log = get_logger("ticker")

Spawn = Callable[..., Any]


class Ticker(Protocol):
    def start(self, key: Hashable, callback: Callable[[], None]) -> bool: ...

    def stop(self, key: Hashable) -> bool: ...

    def is_active(self, key: Hashable) -> bool: ...

    def active_keys(self) -> List[Hashable]: ...

    def stop_all(self) -> None: ...


class _Slot:
    __slots__ = ("handle", "callback")

    def __init__(self, callback: Callable[[], None]):
        self.handle: Any = None
        self.callback = callback


class AsyncTicker:
    """One asyncio loop per key; each callback runs in a worker thread.

    ``spawn`` receives a coroutine function plus its arguments, the way
    ``ft.Page.run_task`` does; without it loops go onto the running event loop.
    """

    def __init__(self, spawn: Optional[Spawn] = None, *, interval: float = TICKER.interval_sec):
        self._spawn = spawn
        self.interval = interval
        self._slots: Dict[Hashable, _Slot] = {}
        self._lock = threading.Lock()

    def _launch(self, fn: Callable[..., Coroutine[Any, Any, None]], *args: Any) -> Any:
        if self._spawn is not None:
            return self._spawn(fn, *args)
        return asyncio.get_running_loop().create_task(fn(*args))

    async def _loop(self, key: Hashable, slot: _Slot) -> None:
        while True:
            await asyncio.sleep(self.interval)
            # a stop/start pair may land between the sleep and the call
            if self._slots.get(key) is not slot:
                return
            try:
                # callbacks commit and write the store; keep that off the loop
                await asyncio.to_thread(slot.callback)
            except Exception:
                log.exception("Tick callback for %r failed", key)

    def start(self, key: Hashable, callback: Callable[[], None]) -> bool:
        with self._lock:
            if key in self._slots:
                return False
            slot = _Slot(callback)
            self._slots[key] = slot
        slot.handle = self._launch(self._loop, key, slot)
        log.debug("Ticker %r started", key)
        return True

    def stop(self, key: Hashable) -> bool:
        with self._lock:
            slot = self._slots.pop(key, None)
        if slot is None:
            return False
        if slot.handle is not None:
            slot.handle.cancel()
        log.debug("Ticker %r stopped", key)
        return True

    def is_active(self, key: Hashable) -> bool:
        return key in self._slots

    def active_keys(self) -> List[Hashable]:
        return list(self._slots)

    def stop_all(self) -> None:
        for key in self.active_keys():
            self.stop(key)


__all__ = ["AsyncTicker", "Ticker"]
