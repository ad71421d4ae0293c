"""Durable key/value stores backing the session counters and offline queue."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from .errors import StoreError

logger = logging.getLogger(__name__)

Value = Union[int, str]


class DurableStore(Protocol):
    def get_int(self, key: str, default: int = 0) -> int: ...

    def set_int(self, key: str, value: int) -> None: ...

    def get_string(self, key: str) -> Optional[str]: ...

    def set_string(self, key: str, value: str) -> None: ...

    def delete_key(self, key: str) -> None: ...

    def has_key(self, key: str) -> bool: ...

    def keys(self, prefix: str = "") -> List[str]: ...


class MemoryStore:
    """Dict-backed store. Survives nothing; intended for tests and ephemeral hosts."""

    def __init__(self, initial: Optional[Dict[str, Value]] = None) -> None:
        self._data: Dict[str, Value] = dict(initial or {})
        self._lock = threading.Lock()

    def get_int(self, key: str, default: int = 0) -> int:
        with self._lock:
            value = self._data.get(key)
        return value if isinstance(value, int) else default

    def set_int(self, key: str, value: int) -> None:
        self._write(key, int(value))

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._data.get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        self._write(key, str(value))

    def delete_key(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()

    def has_key(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))

    def snapshot(self) -> Dict[str, Value]:
        with self._lock:
            return dict(self._data)

    def _write(self, key: str, value: Value) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def _flush(self) -> None:
        """Hook for subclasses persisting after each mutation. Called with the lock held."""
        return None


class JsonFileStore(MemoryStore):
    """Persists every mutation to a JSON document on disk.

    Writes go to a sibling temporary file which then replaces the target, so a
    crash leaves either the previous or the new document, never a torn one.
    """

    def __init__(self, path: str) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._load(self._path))
        logger.debug("JsonFileStore opened path=%s keys=%d", self._path, len(self._data))

    @staticmethod
    def _load(path: Path) -> Dict[str, Value]:
        if not path.exists():
            return {}
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"corrupt store file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"store file {path} does not hold a JSON object")
        return {k: v for k, v in data.items() if isinstance(v, (int, str))}

    @property
    def path(self) -> Path:
        return self._path

    def _flush(self) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        payload = json.dumps(self._data, separators=(",", ":"), sort_keys=True)
        with tmp.open("w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, self._path)


def open_store(path: Optional[str]) -> MemoryStore:
    if path:
        return JsonFileStore(path)
    logger.info("No store path configured; offline queue will not survive restarts")
    return MemoryStore()


__all__ = ["DurableStore", "MemoryStore", "JsonFileStore", "open_store"]
