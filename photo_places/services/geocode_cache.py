"""Durable JSON cache mapping coordinate keys to place names.

The whole mapping lives in memory for the duration of a build and is mirrored
to a single JSON object on disk. Writes go to a sibling temporary file which
is then renamed over the target, so an interrupted flush leaves the previous
snapshot intact.
"""

from __future__ import annotations

import enum
import json
import os
import tempfile
import threading
from pathlib import Path

import structlog

from photo_places.core.exceptions import CacheFlushError, CacheLoadError

logger = structlog.get_logger(__name__)


class PersistencePolicy(str, enum.Enum):
    """When new entries are written to disk."""

    EAGER = "eager"
    DEFERRED = "deferred"


def _read_snapshot(path: Path) -> dict[str, str]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CacheLoadError(f"cannot read {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise CacheLoadError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CacheLoadError(f"expected a JSON object in {path}, got {type(data).__name__}")

    entries: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            logger.warning("geocode_cache_entry_skipped", path=str(path), key=key)
            continue
        entries[key] = value
    return entries


def _write_snapshot(path: Path, entries: dict[str, str]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(entries, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except (OSError, TypeError, ValueError) as exc:
        raise CacheFlushError(f"cannot prepare {path}: {exc}") from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        raise CacheFlushError(f"cannot write {path}: {exc}") from exc
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                logger.warning("geocode_cache_tmp_cleanup_failed", path=str(tmp_path))


class GeocodeCacheStore:
    """In-memory place-name map backed by one JSON file.

    Every ``put`` bumps a generation counter. A flush writes a copy taken at
    one generation and only marks the store clean if no entry arrived while
    the file was being written. Flushes are serialised, so a later snapshot
    is never overwritten by an earlier one.
    """

    def __init__(
        self, path: str | os.PathLike, policy: PersistencePolicy = PersistencePolicy.DEFERRED
    ) -> None:
        self.path = Path(path)
        self.policy = PersistencePolicy(policy)
        self._entries: dict[str, str] = {}
        self._loaded_keys: frozenset[str] = frozenset()
        self._generation = 0
        self._flushed_generation = 0
        self._flush_lock = threading.Lock()

    @classmethod
    def open(
        cls, path: str | os.PathLike, policy: PersistencePolicy = PersistencePolicy.DEFERRED
    ) -> GeocodeCacheStore:
        store = cls(path, policy)
        store.load()
        return store

    @property
    def dirty(self) -> bool:
        return self._generation != self._flushed_generation

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def snapshot(self) -> dict[str, str]:
        return dict(self._entries)

    def load(self) -> dict[str, str]:
        """Replace the in-memory map with the durable snapshot.

        A missing or unreadable file yields an empty store; this never raises.
        """

        if not self.path.exists():
            logger.info("geocode_cache_missing", path=str(self.path))
            entries: dict[str, str] = {}
        else:
            try:
                entries = _read_snapshot(self.path)
            except CacheLoadError as exc:
                logger.warning("geocode_cache_load_failed", path=str(self.path), error=str(exc))
                entries = {}
            else:
                logger.info("geocode_cache_loaded", path=str(self.path), entries=len(entries))

        self._entries = entries
        self._loaded_keys = frozenset(entries)
        self._flushed_generation = self._generation
        return self.snapshot()

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def get_loaded(self, key: str) -> str | None:
        """Look ``key`` up among the entries read from disk by ``load``."""

        if key not in self._loaded_keys:
            return None
        return self._entries.get(key)

    def put(self, key: str, name: str) -> bool:
        """Insert ``name`` under ``key`` unless the key is already known."""

        existing = self._entries.get(key)
        if existing is not None:
            if existing != name:
                logger.warning(
                    "geocode_cache_conflict_ignored", key=key, existing=existing, new=name
                )
            return False

        self._entries[key] = name
        self._generation += 1
        return True

    def flush(self) -> bool:
        """Write the snapshot to disk; return ``False`` if the write failed.

        Flushing a clean store is a no-op, so repeated end-of-build flushes
        cost nothing. Safe to call from worker threads.
        """

        with self._flush_lock:
            generation = self._generation
            if generation == self._flushed_generation:
                return True
            entries = dict(self._entries)
            try:
                _write_snapshot(self.path, entries)
            except CacheFlushError as exc:
                logger.error("geocode_cache_flush_failed", path=str(self.path), error=str(exc))
                return False

            self._flushed_generation = generation
            logger.info(
                "geocode_cache_flushed",
                path=str(self.path),
                entries=len(entries),
                pending=self._generation - generation,
            )
            return True

    def flush_if_eager(self) -> bool:
        if self.policy is PersistencePolicy.EAGER:
            return self.flush()
        return True


__all__ = ["GeocodeCacheStore", "PersistencePolicy"]
