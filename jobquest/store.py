"""Key-value storage for per-profile documents, with file locking.

Two documents per profile: ``gamestate:{profile_id}`` and ``jobs:{profile_id}``.
Writes always replace the whole document.
"""
from __future__ import annotations

import fcntl
import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jobquest.errors import StoreError
from jobquest.log import get_logger

log = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def gamestate_key(profile_id: str) -> str:
    return f"gamestate:{profile_id}"


def jobs_key(profile_id: str) -> str:
    return f"jobs:{profile_id}"


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored document, or ``None`` when the key is missing."""

    @abstractmethod
    def put(self, key: str, doc: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def put_many(self, docs: dict[str, dict[str, Any]]) -> None:
        for key, doc in docs.items():
            self.put(key, doc)

    def delete_many(self, keys: list[str]) -> None:
        for key in keys:
            self.delete(key)


class MemoryStore(KeyValueStore):
    """Dict-backed store; documents are JSON round-tripped like on disk."""

    def __init__(self) -> None:
        self._docs: dict[str, str] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        raw = self._docs.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, doc: dict[str, Any]) -> None:
        self._docs[key] = json.dumps(doc)

    def delete(self, key: str) -> None:
        self._docs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._docs)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonFileStore(KeyValueStore):
    """One JSON file per key under ``root``.

    Writers hold an exclusive lock on ``.lock`` and swap the file in with
    ``os.replace``, so readers see either the old or the new document.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock_path = self.root / ".lock"

    def _path(self, key: str) -> Path:
        return self.root / f"{_UNSAFE.sub('_', key.replace(':', '__'))}.json"

    def get(self, key: str) -> dict[str, Any] | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(self._lock_path, "a+", encoding="utf-8") as lock_file:
            _lock(lock_file, exclusive=False)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except FileNotFoundError:
                return None
            except (OSError, json.JSONDecodeError) as exc:
                log.error("Could not read %s: %s", path.name, exc)
                raise StoreError(f"Unreadable document for {key!r}: {exc}") from exc
            finally:
                _unlock(lock_file)

    def put(self, key: str, doc: dict[str, Any]) -> None:
        self.put_many({key: doc})

    def put_many(self, docs: dict[str, dict[str, Any]]) -> None:
        """Write several documents under one lock."""
        with open(self._lock_path, "a+", encoding="utf-8") as lock_file:
            _lock(lock_file)
            try:
                for key, doc in docs.items():
                    self._write(self._path(key), doc)
            finally:
                _unlock(lock_file)
        log.debug("Stored %s", ", ".join(docs))

    def _write(self, path: Path, doc: dict[str, Any]) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as exc:
            log.error("Could not write %s: %s", path.name, exc)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StoreError(f"Could not write {path.name}: {exc}") from exc

    def delete(self, key: str) -> None:
        self.delete_many([key])

    def delete_many(self, keys: list[str]) -> None:
        """Remove several documents under one lock."""
        with open(self._lock_path, "a+", encoding="utf-8") as lock_file:
            _lock(lock_file)
            try:
                for key in keys:
                    self._path(key).unlink(missing_ok=True)
            except OSError as exc:
                log.error("Could not delete %s: %s", ", ".join(keys), exc)
                raise StoreError(f"Could not delete {keys}: {exc}") from exc
            finally:
                _unlock(lock_file)
        log.debug("Deleted %s", ", ".join(keys))
