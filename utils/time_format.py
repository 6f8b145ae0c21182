"""Formatting and parsing of stopwatch durations."""
from __future__ import annotations

import re
from typing import Optional

from core.settings import COUNTDOWN

SECONDS_PER_DAY = 86400

_GOAL_RE = re.compile(r"^(\d+):([0-5]\d):([0-5]\d)$")


def format_time(seconds: int) -> str:
    """Render ``seconds`` as ``HH:MM:SS``; hours are not wrapped at 24."""

    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _component(value: str) -> int:
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return 0


def parse_goal_time(text: Optional[str]) -> int:
    """Lenient ``H:M:S`` parser; missing or non-numeric parts count as zero."""

    if not text:
        return 0
    parts = text.split(":")[:3]
    parts += ["0"] * (3 - len(parts))
    hours, minutes, seconds = (_component(p) for p in parts)
    return hours * 3600 + minutes * 60 + seconds


def is_valid_goal_time(text: Optional[str]) -> bool:
    if text is None:
        return False
    return bool(_GOAL_RE.match(text.strip()))


def format_countdown(seconds: int) -> str:
    if seconds <= 0:
        return COUNTDOWN.expired_text
    days = seconds // SECONDS_PER_DAY
    rest = seconds % SECONDS_PER_DAY
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d, {hours:02d}h, {minutes:02d}m, {secs:02d}s left"


__all__ = [
    "SECONDS_PER_DAY",
    "format_countdown",
    "format_time",
    "is_valid_goal_time",
    "parse_goal_time",
]
