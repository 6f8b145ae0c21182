import json
from datetime import datetime, timezone

from models.study_task import StudyTask
from storage.repositories import ExamRepository, StudyTaskRepository
from storage.store import ClientStorageStore, MemoryStore, SqliteStore


class FakeClientStorage:
    """Mimics ``page.client_storage``: values may come back as any JSON type."""

    def __init__(self):
        self.values = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value
        return True

    def remove(self, key):
        self.values.pop(key, None)
        return True


def test_sqlite_store_survives_reopen(tmp_path):
    path = tmp_path / "store.db"
    store = SqliteStore(path)
    store.set("tasks", "[]")
    store.set("tasks", '[{"id": 0}]')
    store.set("examDateTime", "2025-01-01T00:00:00.000Z")
    store.remove("examDateTime")
    store.close()

    reopened = SqliteStore(path)
    assert reopened.get("tasks") == '[{"id": 0}]'
    assert reopened.get("examDateTime") is None
    assert reopened.get("missing") is None
    reopened.close()


def test_client_storage_adapter_ignores_non_string_values():
    backing = FakeClientStorage()
    store = ClientStorageStore(backing)
    store.set("tasks", "[]")
    assert backing.values == {"tasks": "[]"}
    backing.values["examDateTime"] = 12
    assert store.get("examDateTime") is None
    store.remove("tasks")
    assert store.get("tasks") is None


def test_task_repository_reads_records_written_by_the_browser_page():
    payload = json.dumps(
        [
            {"id": 0, "text": "Task 1", "time": 12, "isRunning": False, "checked": True},
            {"id": 1, "text": "Task 2", "time": 0, "isRunning": True, "checked": False, "goalTime": "01:00:00"},
        ]
    )
    repo = StudyTaskRepository(MemoryStore({"tasks": payload}))
    assert repo.load() == (
        StudyTask(id=0, text="Task 1", time=12, checked=True),
        StudyTask(id=1, text="Task 2", is_running=True, goal_time="01:00:00"),
    )


def test_task_repository_treats_garbage_as_absent():
    assert StudyTaskRepository(MemoryStore()).load() == ()
    assert StudyTaskRepository(MemoryStore({"tasks": "{not json"})).load() == ()
    assert StudyTaskRepository(MemoryStore({"tasks": '{"id": 1}'})).load() == ()


def test_task_repository_drops_unusable_records():
    payload = json.dumps(
        [
            {"id": 3, "text": "ok", "time": -4},
            {"text": "no id"},
            {"id": "7"},
            {"id": 3, "text": "duplicate"},
            "junk",
            {"id": 4, "time": "soon", "goalTime": 5},
        ]
    )
    tasks = StudyTaskRepository(MemoryStore({"tasks": payload})).load()
    assert tasks == (
        StudyTask(id=3, text="ok", time=0),
        StudyTask(id=4, text="", time=0),
    )


def test_task_repository_save_overwrites_wholesale():
    store = MemoryStore()
    repo = StudyTaskRepository(store)
    repo.save([StudyTask(id=0, text="a"), StudyTask(id=1, text="b")])
    repo.save([StudyTask(id=1, text="b")])
    assert [t.id for t in repo.load()] == [1]


def test_exam_repository_round_trip():
    store = MemoryStore()
    repo = ExamRepository(store)
    moment = datetime(2025, 6, 1, 9, 30, 0, 250000, tzinfo=timezone.utc)
    repo.save(moment)
    assert store.get("examDateTime") == "2025-06-01T09:30:00.250Z"
    assert repo.load() == moment
