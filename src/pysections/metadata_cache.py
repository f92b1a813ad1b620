"""Caches of which sections have a backing file.

A :class:`CacheEntry` remembers the section names found in a store's base
directory together with the directory's modification time.  Stores compare
that time with the live one before trusting an entry.
"""
from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from .errors import CacheBackendError

logger = logging.getLogger(__name__)

FILE_CACHE_NAME = "_.cache"
SHARED_CACHE_TTL = 86400


@dataclass(frozen=True)
class CacheEntry:
    available_files: frozenset[str] = field(default_factory=frozenset)
    directory_mtime: int | None = None

    def is_fresh(self, live_mtime: int | None) -> bool:
        return self.directory_mtime is None or self.directory_mtime == live_mtime


class MetadataCache(ABC):
    """Storage for a single :class:`CacheEntry`."""

    name: str = ""

    @abstractmethod
    def get(self) -> CacheEntry | None:
        pass

    @abstractmethod
    def put(self, available_files: Iterable[str], directory_mtime: int | None) -> bool:
        pass

    @abstractmethod
    def invalidate(self) -> bool:
        pass

    @abstractmethod
    def exists(self) -> bool:
        pass

    def prepare(self) -> None:
        """Hook run before the directory time is sampled for :meth:`put`."""


class FileMetadataCache(MetadataCache):
    """Entry stored as a small JSON blob inside the base directory."""

    def __init__(self, directory: Path, name: str = FILE_CACHE_NAME) -> None:
        self.directory = Path(directory)
        self.name = name

    @property
    def file(self) -> Path:
        return self.directory / self.name

    def exists(self) -> bool:
        return self.file.is_file()

    def _read(self) -> CacheEntry:
        try:
            raw = self.file.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError) as exc:
            raise CacheBackendError(str(exc)) from exc
        if not isinstance(data, dict) or not isinstance(data.get("available_files"), list):
            raise CacheBackendError(f"malformed cache blob {self.file}")
        mtime = data.get("time")
        if mtime is not None and not isinstance(mtime, int):
            raise CacheBackendError(f"malformed cache time in {self.file}")
        return CacheEntry(frozenset(str(n) for n in data["available_files"]), mtime)

    def get(self) -> CacheEntry | None:
        if not self.exists():
            return None
        try:
            return self._read()
        except CacheBackendError as exc:
            logger.warning("Ignoring unreadable metadata cache %s: %s", self.file, exc)
            return None

    def prepare(self) -> None:
        # Creating the blob changes the directory time; writing into an
        # existing one does not.
        if self.directory.is_dir() and not self.exists():
            try:
                self.file.touch(mode=0o600)
            except OSError as exc:
                logger.warning("Failed to create metadata cache %s: %s", self.file, exc)

    def put(self, available_files: Iterable[str], directory_mtime: int | None) -> bool:
        if not self.directory.is_dir():
            return False
        payload = {"available_files": sorted(available_files), "time": directory_mtime}
        try:
            with self.file.open("w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.chmod(self.file, 0o600)
        except OSError as exc:
            logger.warning("Failed to write metadata cache %s: %s", self.file, exc)
            return False
        return True

    def invalidate(self) -> bool:
        try:
            self.file.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove metadata cache %s: %s", self.file, exc)
        return not self.file.exists()


_shared: dict[str, tuple[float, CacheEntry]] = {}
_shared_lock = Lock()


def shared_cache_key(directory: Path) -> str:
    digest = hashlib.md5(str(Path(directory).resolve()).encode("utf-8")).hexdigest()
    return f"pysections_{digest}"


class SharedMetadataCache(MetadataCache):
    """Entry kept in a process-wide registry with a time-to-live."""

    def __init__(self, key: str, ttl: float = SHARED_CACHE_TTL) -> None:
        self.name = key
        self.ttl = ttl

    @classmethod
    def for_directory(cls, directory: Path, ttl: float = SHARED_CACHE_TTL) -> SharedMetadataCache:
        return cls(shared_cache_key(directory), ttl=ttl)

    def _live(self) -> CacheEntry | None:
        with _shared_lock:
            item = _shared.get(self.name)
            if item is None:
                return None
            expires, entry = item
            if time.monotonic() >= expires:
                del _shared[self.name]
                return None
            return entry

    def exists(self) -> bool:
        return self._live() is not None

    def get(self) -> CacheEntry | None:
        return self._live()

    def put(self, available_files: Iterable[str], directory_mtime: int | None) -> bool:
        entry = CacheEntry(frozenset(available_files), directory_mtime)
        with _shared_lock:
            _shared[self.name] = (time.monotonic() + self.ttl, entry)
        return True

    def invalidate(self) -> bool:
        with _shared_lock:
            _shared.pop(self.name, None)
        return True


def clear_shared_cache() -> None:
    with _shared_lock:
        _shared.clear()


def directory_mtime(directory: Path) -> int | None:
    try:
        return Path(directory).stat().st_mtime_ns
    except OSError:
        return None
