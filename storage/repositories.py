from __future__ import annotations

import json
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from core.logs import get_logger
from core.settings import KEYS
from models.study_task import StudyTask
from storage.store import KeyValueStore
from utils.datetime_utils import parse_iso, to_iso_utc, to_local

log = get_logger("storage")


class StudyTaskRepository:
    """Reads and overwrites the whole task collection under one key."""

    def __init__(self, store: KeyValueStore, key: str = KEYS.tasks):
        self.store = store
        self.key = key

    def load(self) -> tuple[StudyTask, ...]:
        raw = self.store.get(self.key)
        if not raw:
            return ()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("Ignoring malformed %r payload", self.key)
            return ()
        if not isinstance(data, list):
            log.warning("Ignoring %r payload of type %s", self.key, type(data).__name__)
            return ()

        tasks: list[StudyTask] = []
        seen: set[int] = set()
        for item in data:
            task = StudyTask.from_dict(item) if isinstance(item, dict) else None
            if task is None or task.id in seen:
                log.warning("Skipping unusable task record: %r", item)
                continue
            seen.add(task.id)
            tasks.append(task)
        return tuple(tasks)

    def save(self, tasks: Iterable[StudyTask]) -> None:
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        self.store.set(self.key, payload)


class ExamRepository:
    def __init__(
        self,
        store: KeyValueStore,
        key: str = KEYS.exam_datetime,
        *,
        zone: Optional[tzinfo] = None,
    ):
        self.store = store
        self.key = key
        self.zone = zone

    def load(self) -> Optional[datetime]:
        raw = self.store.get(self.key)
        if not raw:
            return None
        value = parse_iso(raw)
        if value is None:
            log.warning("Ignoring malformed %r value: %r", self.key, raw)
            return None
        return to_local(value, self.zone)

    def save(self, moment: datetime) -> None:
        self.store.set(self.key, to_iso_utc(moment))


__all__ = ["ExamRepository", "StudyTaskRepository"]
