# models/countdown.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any


class CountdownPhase(str, Enum):
    UNSET = "unset"    # no confirmed target, display hidden
    ARMED = "armed"    # target confirmed, ticking


@dataclass(frozen=True)
class CountdownState:
    exam_datetime: datetime
    phase: CountdownPhase = CountdownPhase.UNSET
    seconds_remaining: int = 0

    @property
    def is_visible(self) -> bool:
        return self.phase is CountdownPhase.ARMED

    def evolve(self, **changes: Any) -> "CountdownState":
        return replace(self, **changes)


__all__ = ["CountdownPhase", "CountdownState"]
