"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return base.expanduser() / sanitized


APP_NAME = "Final Buzzer"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

STORE_DB_PATH = DATA_DIR / "store.db"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "final_buzzer.log"


@dataclass(frozen=True)
class StoreKeys:
    tasks: str = "tasks"
    exam_datetime: str = "examDateTime"


KEYS = StoreKeys()


@dataclass(frozen=True)
class TickerSettings:
    interval_sec: float = 1.0


TICKER = TickerSettings()


@dataclass(frozen=True)
class CountdownSettings:
    # target shown before the user picks one: today at noon
    default_hour: int = 12
    default_minute: int = 0
    expired_text: str = "Time is up!"


COUNTDOWN = CountdownSettings()


@dataclass(frozen=True)
class ThemeColors:
    surface_bg: str = "#F1F5F9"
    outline: str = "#E5E7EB"
    text_subtle: str = "#6B7280"
    running: str = "#16A34A"
    goal_reached: str = "#4F46E5"


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "system"
    color_scheme_seed: str = "#EA580C"
    window_min_width: int = 640
    window_min_height: int = 600
    list_max_width: int = 1000
    theme: ThemeColors = ThemeColors()


UI = UISettings()


@dataclass(frozen=True)
class LogSettings:
    max_bytes: int = 1_000_000
    backup_count: int = 3
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


LOGGING = LogSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "STORE_DB_PATH",
    "CONFIG_PATH",
    "LOG_PATH",
    "KEYS",
    "TICKER",
    "COUNTDOWN",
    "UI",
    "LOGGING",
    "get_default_data_dir",
]
