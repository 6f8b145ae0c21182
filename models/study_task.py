# models/study_task.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class StudyTask:
    """One row of the study list. Instances are snapshots; edits build new ones."""

    id: int
    text: str
    time: int = 0
    is_running: bool = False
    checked: bool = False
    goal_time: Optional[str] = None

    @classmethod
    def new(cls, task_id: int, position: int) -> "StudyTask":
        return cls(id=task_id, text=f"Task {position}")

    def evolve(self, **changes: Any) -> "StudyTask":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "time": self.time,
            "isRunning": self.is_running,
            "checked": self.checked,
        }
        if self.goal_time is not None:
            payload["goalTime"] = self.goal_time
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["StudyTask"]:
        """Build a task from a stored record; ``None`` when it has no usable id."""

        raw_id = data.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            return None

        raw_time = data.get("time")
        if isinstance(raw_time, bool) or not isinstance(raw_time, (int, float)):
            raw_time = 0
        goal = data.get("goalTime")

        return cls(
            id=raw_id,
            text=str(data.get("text") or ""),
            time=max(int(raw_time), 0),
            is_running=bool(data.get("isRunning", False)),
            checked=bool(data.get("checked", False)),
            goal_time=goal if isinstance(goal, str) else None,
        )


__all__ = ["StudyTask"]
