"""Local key-value stores holding the serialized page state."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from sqlmodel import Field, SQLModel, Session, create_engine

from core.settings import STORE_DB_PATH


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dictionary-backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class StoreEntry(SQLModel, table=True):
    __tablename__ = "store_entry"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)


STORE_TABLES = [StoreEntry.__table__]


class SqliteStore:
    """SQLite file holding one row per key; used when running as a desktop app."""

    def __init__(self, path: Union[str, Path, None] = None, *, engine=None):
        if engine is None:
            db_path = Path(path or STORE_DB_PATH)
            db_path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(f"sqlite:///{db_path.as_posix()}", echo=False)
        self._engine = engine
        SQLModel.metadata.create_all(self._engine, tables=STORE_TABLES)

    def get(self, key: str) -> Optional[str]:
        with Session(self._engine) as session:
            row = session.get(StoreEntry, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with Session(self._engine) as session:
            row = session.get(StoreEntry, key)
            if row is None:
                row = StoreEntry(key=key, value=value)
            else:
                row.value = value
                row.updated_at = _utcnow()
            session.add(row)
            session.commit()

    def remove(self, key: str) -> None:
        with Session(self._engine) as session:
            row = session.get(StoreEntry, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def close(self) -> None:
        self._engine.dispose()


class ClientStorageStore:
    """Adapter over Flet's ``page.client_storage`` (browser local storage on the web).

    Flet namespaces and JSON-encodes entries itself, so these keys do not line
    up with raw ``localStorage`` keys written by other pages.
    """

    def __init__(self, client_storage: Any):
        self._storage = client_storage

    def get(self, key: str) -> Optional[str]:
        value = self._storage.get(key)
        if value is None or isinstance(value, str):
            return value
        return None

    def set(self, key: str, value: str) -> None:
        self._storage.set(key, value)

    def remove(self, key: str) -> None:
        self._storage.remove(key)


__all__ = [
    "ClientStorageStore",
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "StoreEntry",
    "STORE_TABLES",
]
