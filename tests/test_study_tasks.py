import json

import pytest

from fakes import CountingStore, FakeTicker
from services.study_tasks import InvalidGoalTime, StudyTaskService, ticker_key
from storage.repositories import StudyTaskRepository
from storage.store import MemoryStore


def make_service(store=None, *, strict=True):
    store = store if store is not None else MemoryStore()
    ticker = FakeTicker()
    svc = StudyTaskService(StudyTaskRepository(store), ticker, strict_goal_time=strict)
    svc.load()
    return svc, ticker, store


def stored_tasks(store):
    return json.loads(store.get("tasks"))


def test_add_task_defaults_and_persists():
    svc, _, store = make_service()
    task = svc.add_task()
    assert (task.id, task.text, task.time, task.is_running, task.checked) == (0, "Task 1", 0, False, False)
    assert stored_tasks(store) == [
        {"id": 0, "text": "Task 1", "time": 0, "isRunning": False, "checked": False}
    ]


def test_ids_stay_unique_after_deletes():
    svc, _, _ = make_service()
    for _ in range(3):
        svc.add_task()
    svc.delete_task(0)
    svc.delete_task(1)
    svc.add_task()
    svc.add_task()
    ids = [t.id for t in svc.tasks]
    assert len(ids) == len(set(ids))
    assert [t.text for t in svc.tasks][-1] == "Task 3"


def test_delete_unknown_id_is_noop():
    svc, _, store = make_service(CountingStore())
    svc.add_task()
    writes = len(store.writes)
    assert svc.delete_task(42) is False
    assert len(store.writes) == writes
    assert len(svc.tasks) == 1


def test_toggle_rename_on_unknown_id_return_none():
    svc, _, _ = make_service()
    assert svc.toggle_checked(7) is None
    assert svc.rename_task(7, "x") is None
    assert svc.start_or_stop(7) is None
    assert svc.reset_task(7) is None


def test_toggle_checked_and_rename():
    svc, _, store = make_service()
    task = svc.add_task()
    assert svc.toggle_checked(task.id).checked is True
    assert svc.rename_task(task.id, "").text == ""
    assert stored_tasks(store)[0]["checked"] is True
    assert stored_tasks(store)[0]["text"] == ""


def test_start_or_stop_attaches_one_ticker_per_task():
    svc, ticker, _ = make_service()
    task = svc.add_task()
    key = ticker_key(task.id)

    assert svc.start_or_stop(task.id).is_running is True
    assert ticker.is_active(key)
    assert svc.start_or_stop(task.id).is_running is False
    assert not ticker.is_active(key)
    svc.start_or_stop(task.id)
    assert ticker.active_keys() == [key]
    assert svc.get(task.id).time == 0


def test_ticks_only_touch_their_task():
    svc, ticker, store = make_service()
    first = svc.add_task()
    second = svc.add_task()
    svc.start_or_stop(first.id)

    ticker.fire(ticker_key(first.id), times=5)
    assert svc.get(first.id).time == 5
    assert svc.get(second.id).time == 0
    assert stored_tasks(store)[0]["time"] == 5


def test_editing_other_tasks_does_not_restart_tickers():
    svc, ticker, _ = make_service()
    first = svc.add_task()
    second = svc.add_task()
    svc.start_or_stop(first.id)
    started = list(ticker.started)

    svc.rename_task(second.id, "Chemistry")
    svc.toggle_checked(second.id)
    svc.add_task()
    assert ticker.started == started
    assert ticker.stopped == []


def test_reset_stops_and_zeroes():
    svc, ticker, _ = make_service()
    task = svc.add_task()
    svc.start_or_stop(task.id)
    ticker.fire(ticker_key(task.id), times=3)

    reset = svc.reset_task(task.id)
    assert (reset.time, reset.is_running) == (0, False)
    assert not ticker.is_active(ticker_key(task.id))
    # idle task stays idle
    reset = svc.reset_task(task.id)
    assert (reset.time, reset.is_running) == (0, False)


def test_delete_running_task_detaches_ticker():
    svc, ticker, _ = make_service()
    task = svc.add_task()
    svc.start_or_stop(task.id)
    svc.delete_task(task.id)
    assert ticker.active_keys() == []


def test_tick_after_stop_is_ignored():
    svc, _, _ = make_service()
    task = svc.add_task()
    assert svc.tick(task.id) is None
    assert svc.get(task.id).time == 0


def test_totals_follow_current_collection():
    svc, ticker, _ = make_service()
    a = svc.add_task()
    b = svc.add_task()
    svc.start_or_stop(a.id)
    ticker.fire(ticker_key(a.id), times=90)
    svc.start_or_stop(b.id)
    ticker.fire(ticker_key(b.id), times=10)
    svc.set_goal_time(a.id, "01:00:00")
    svc.set_goal_time(b.id, "00:30:30")

    assert svc.total_time_spent() == 100 == sum(t.time for t in svc.tasks)
    assert svc.total_goal_time() == 3600 + 1830
    svc.delete_task(a.id)
    assert svc.total_time_spent() == 10
    assert svc.total_goal_time() == 1830


def test_strict_goal_time_rejects_garbage():
    svc, _, _ = make_service()
    task = svc.add_task()
    svc.set_goal_time(task.id, "00:20:00")
    with pytest.raises(InvalidGoalTime):
        svc.set_goal_time(task.id, "twenty minutes")
    assert svc.get(task.id).goal_time == "00:20:00"
    assert svc.set_goal_time(task.id, "").goal_time is None


def test_lenient_goal_time_keeps_raw_string():
    svc, _, _ = make_service(strict=False)
    task = svc.add_task()
    assert svc.set_goal_time(task.id, "ab:05:xx").goal_time == "ab:05:xx"
    assert svc.total_goal_time() == 300


def test_persistence_round_trip():
    store = MemoryStore()
    svc, ticker, _ = make_service(store)
    svc.add_task()
    task = svc.add_task()
    svc.rename_task(task.id, "Physics")
    svc.set_goal_time(task.id, "02:00:00")
    svc.start_or_stop(task.id)
    ticker.fire(ticker_key(task.id), times=4)
    before = svc.tasks

    reloaded, reloaded_ticker, _ = make_service(store)
    assert reloaded.tasks == before
    # tasks saved as running resume ticking after a reload
    assert reloaded_ticker.active_keys() == [ticker_key(task.id)]


def test_listeners_are_notified_and_failures_swallowed():
    svc, ticker, _ = make_service()
    events = []

    def broken():
        raise RuntimeError("render failed")

    svc.subscribe("after_update", broken)
    svc.subscribe("after_update", lambda: events.append("update"))
    svc.subscribe("after_tick", lambda: events.append("tick"))
    task = svc.add_task()
    svc.start_or_stop(task.id)
    ticker.fire(ticker_key(task.id))
    assert events == ["update", "update", "tick"]

    with pytest.raises(ValueError):
        svc.subscribe("after_nothing", lambda: None)
