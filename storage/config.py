"""Simple JSON-backed configuration store."""
from __future__ import annotations

import contextlib
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import CONFIG_PATH

STORE_BACKENDS = ("auto", "client", "sqlite")


@dataclass
class AppConfig:
    """User preferences persisted to ``config.json``."""

    store_backend: str = "auto"
    strict_goal_time: bool = True
    log_level: str = "INFO"


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    defaults = AppConfig()

    backend = data.get("store_backend")
    if backend not in STORE_BACKENDS:
        backend = defaults.store_backend
    strict = data.get("strict_goal_time")
    if not isinstance(strict, bool):
        strict = defaults.strict_goal_time
    level = data.get("log_level")
    if not isinstance(level, str) or not level.strip():
        level = defaults.log_level

    return AppConfig(store_backend=backend, strict_goal_time=strict, log_level=level.upper())


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    """Write ``config`` through a sibling temp file so a crash never leaves half a file."""

    target = path or CONFIG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    tmp.write_text(json.dumps(asdict(config), indent=2, sort_keys=True), encoding="utf-8")
    try:
        tmp.replace(target)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise


def ensure_config(path: Optional[Path] = None) -> AppConfig:
    """Load the config, writing the defaults on first launch so users can edit them."""

    target = path or CONFIG_PATH
    cfg = load_config(target)
    if not target.exists():
        save_config(cfg, target)
    return cfg


__all__ = ["AppConfig", "STORE_BACKENDS", "ensure_config", "load_config", "save_config"]
