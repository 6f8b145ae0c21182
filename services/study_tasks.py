# services/study_tasks.py
from __future__ import annotations

import threading
from functools import partial
from typing import Callable, Iterable, Optional

from core.logs import get_logger
from models.study_task import StudyTask
from services.ticker import Ticker
from storage.repositories import StudyTaskRepository
from utils.time_format import is_valid_goal_time, parse_goal_time

log = get_logger("tasks")


class InvalidGoalTime(ValueError):
    """Raised for goal strings that are not ``H:MM:SS`` while validation is strict."""


def ticker_key(task_id: int) -> tuple[str, int]:
    return ("task", task_id)


class StudyTaskService:
    """Owns the study list and keeps the store and per-task tickers in step with it.

    Every change builds a new tuple of :class:`StudyTask` snapshots and hands it to
    :meth:`_commit`, which applies it, writes that same tuple to the store and
    attaches/detaches tickers only for tasks whose running flag changed.
    """

    EVENTS = ("after_update", "after_tick")

    def __init__(
        self,
        repo: StudyTaskRepository,
        ticker: Ticker,
        *,
        strict_goal_time: bool = True,
    ):
        self.repo = repo
        self.ticker = ticker
        self.strict_goal_time = strict_goal_time
        self._tasks: tuple[StudyTask, ...] = ()
        self._lock = threading.RLock()
        self._listeners: dict[str, set[Callable[[], None]]] = {e: set() for e in self.EVENTS}

    # ---------- events ----------
    def subscribe(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                listener()
            except Exception:
                log.exception("Listener for %s failed", event)

    # ---------- state ----------
    @property
    def tasks(self) -> tuple[StudyTask, ...]:
        return self._tasks

    def get(self, task_id: int) -> Optional[StudyTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def load(self) -> tuple[StudyTask, ...]:
        with self._lock:
            tasks = self.repo.load()
            self._tasks = tasks
            self._sync_tickers(tasks)
        log.info("Loaded %d task(s), %d running", len(tasks), sum(t.is_running for t in tasks))
        self._emit("after_update")
        return tasks

    def shutdown(self) -> None:
        with self._lock:
            for task in self._tasks:
                self.ticker.stop(ticker_key(task.id))

    def _commit(self, tasks: tuple[StudyTask, ...]) -> None:
        # callers hold the lock and emit once it is released
        self._tasks = tasks
        self.repo.save(tasks)
        self._sync_tickers(tasks)

    def _sync_tickers(self, tasks: Iterable[StudyTask]) -> None:
        running = {t.id for t in tasks if t.is_running}
        for key in self.ticker.active_keys():
            if isinstance(key, tuple) and key[0] == "task" and key[1] not in running:
                self.ticker.stop(key)
        for task_id in running:
            key = ticker_key(task_id)
            if not self.ticker.is_active(key):
                self.ticker.start(key, partial(self.tick, task_id))

    def _update(
        self,
        task_id: int,
        change: Callable[[StudyTask], StudyTask],
        event: str = "after_update",
    ) -> Optional[StudyTask]:
        with self._lock:
            current = self.get(task_id)
            if current is None:
                log.debug("Ignoring change for unknown task %s", task_id)
                return None
            if event == "after_tick" and not current.is_running:
                return None
            updated = change(current)
            self._commit(tuple(updated if t.id == task_id else t for t in self._tasks))
        self._emit(event)
        return updated

    # ---------- operations ----------
    def add_task(self) -> StudyTask:
        with self._lock:
            next_id = max((t.id for t in self._tasks), default=-1) + 1
            task = StudyTask.new(next_id, len(self._tasks) + 1)
            self._commit(self._tasks + (task,))
        log.info("Added task %s", task.id)
        self._emit("after_update")
        return task

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            remaining = tuple(t for t in self._tasks if t.id != task_id)
            if len(remaining) == len(self._tasks):
                return False
            self._commit(remaining)
        log.info("Deleted task %s", task_id)
        self._emit("after_update")
        return True

    def toggle_checked(self, task_id: int) -> Optional[StudyTask]:
        return self._update(task_id, lambda t: t.evolve(checked=not t.checked))

    def rename_task(self, task_id: int, text: str) -> Optional[StudyTask]:
        return self._update(task_id, lambda t: t.evolve(text=text or ""))

    def set_goal_time(self, task_id: int, goal: Optional[str]) -> Optional[StudyTask]:
        raw = goal or ""
        cleaned = raw.strip()
        if self.get(task_id) is None:
            return None
        if self.strict_goal_time:
            if cleaned and not is_valid_goal_time(cleaned):
                log.warning("Rejected goal time %r for task %s", goal, task_id)
                raise InvalidGoalTime(f"Goal time must look like HH:MM:SS, got {goal!r}")
            value = cleaned or None
        else:
            value = raw if cleaned else None
        return self._update(task_id, lambda t: t.evolve(goal_time=value))

    def start_or_stop(self, task_id: int) -> Optional[StudyTask]:
        task = self._update(task_id, lambda t: t.evolve(is_running=not t.is_running))
        if task is not None:
            log.info("Task %s %s at %ss", task_id, "started" if task.is_running else "paused", task.time)
        return task

    def reset_task(self, task_id: int) -> Optional[StudyTask]:
        return self._update(task_id, lambda t: t.evolve(time=0, is_running=False))

    def tick(self, task_id: int) -> Optional[StudyTask]:
        """Ticker callback: one more second for a running task, nothing otherwise."""

        return self._update(task_id, lambda t: t.evolve(time=t.time + 1), "after_tick")

    # ---------- totals ----------
    def total_time_spent(self) -> int:
        return sum(t.time for t in self._tasks)

    def total_goal_time(self) -> int:
        return sum(parse_goal_time(t.goal_time) for t in self._tasks if t.goal_time)


__all__ = ["InvalidGoalTime", "StudyTaskService", "ticker_key"]
