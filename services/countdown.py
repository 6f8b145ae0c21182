# services/countdown.py
from __future__ import annotations

import threading
from datetime import date, datetime, time
from typing import Callable, Optional

from core.logs import get_logger
from models.countdown import CountdownPhase, CountdownState
from services.ticker import Ticker
from storage.repositories import ExamRepository
from utils.datetime_utils import (
    default_target,
    local_now,
    replace_date,
    replace_time,
    seconds_between,
)
from utils.time_format import format_countdown

log = get_logger("countdown")

COUNTDOWN_KEY = "countdown"


class CountdownService:
    """Single exam countdown: ``UNSET`` until confirmed, then ``ARMED`` for good.

    While armed the remaining time is recomputed from the clock on each tick
    rather than decremented, so a late tick never lets the display drift.
    """

    def __init__(
        self,
        repo: ExamRepository,
        ticker: Ticker,
        *,
        now: Callable[[], datetime] = local_now,
    ):
        self.repo = repo
        self.ticker = ticker
        self.now = now
        self._state = CountdownState(exam_datetime=default_target(now()))
        self._lock = threading.Lock()
        self._listeners: set[Callable[[], None]] = set()

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.add(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.discard(callback)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                log.exception("Countdown listener failed")

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._state.is_visible

    @property
    def seconds_remaining(self) -> int:
        return self._state.seconds_remaining

    def _remaining(self, target: datetime) -> int:
        return seconds_between(self.now(), target)

    def _apply(self, state: CountdownState) -> None:
        with self._lock:
            self._state = state
        self._emit()

    def load(self) -> CountdownState:
        saved = self.repo.load()
        if saved is None:
            return self._state
        self._apply(
            CountdownState(
                exam_datetime=saved,
                phase=CountdownPhase.ARMED,
                seconds_remaining=self._remaining(saved),
            )
        )
        self._ensure_ticker()
        log.info("Restored exam target %s", saved.isoformat())
        return self._state

    def _retarget(self, target: datetime) -> CountdownState:
        state = self._state.evolve(exam_datetime=target)
        if state.is_visible:
            state = state.evolve(seconds_remaining=self._remaining(target))
        self._apply(state)
        return state

    def set_target_date(self, new_date: date) -> CountdownState:
        return self._retarget(replace_date(self._state.exam_datetime, new_date))

    def set_target_time(self, new_time: time) -> CountdownState:
        return self._retarget(replace_time(self._state.exam_datetime, new_time))

    def confirm(self) -> CountdownState:
        target = self._state.exam_datetime
        state = self._state.evolve(
            phase=CountdownPhase.ARMED,
            seconds_remaining=self._remaining(target),
        )
        self.repo.save(target)
        self._apply(state)
        self._ensure_ticker()
        log.info("Exam target confirmed: %s (%ss left)", target.isoformat(), state.seconds_remaining)
        return state

    def refresh(self) -> int:
        """Ticker callback; recomputes ``seconds_remaining`` from the clock."""

        if not self._state.is_visible:
            return 0
        remaining = self._remaining(self._state.exam_datetime)
        if remaining != self._state.seconds_remaining:
            self._apply(self._state.evolve(seconds_remaining=remaining))
        return remaining

    def display_text(self) -> Optional[str]:
        if not self._state.is_visible:
            return None
        return format_countdown(self._state.seconds_remaining)

    def shutdown(self) -> None:
        self.ticker.stop(COUNTDOWN_KEY)

    def _ensure_ticker(self) -> None:
        if not self.ticker.is_active(COUNTDOWN_KEY):
            self.ticker.start(COUNTDOWN_KEY, self.refresh)


__all__ = ["COUNTDOWN_KEY", "CountdownService"]
