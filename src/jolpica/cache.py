"""Session-scoped result cache with per-entry freshness policies."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from datetime import date
from enum import Enum
from typing import Any, Callable

from jolpica.exceptions import CacheCorruptError

logger = logging.getLogger(__name__)


class Freshness(str, Enum):
    """How long a cached payload stays valid."""

    PERMANENT = "permanent"
    DAILY = "daily"


def cache_key(domain: str, version: int, *entity: str | int) -> str:
    """Build a ``<domain>_v<version>_<entity...>`` storage key."""
    parts = [domain, f"v{version}", *(str(e) for e in entity)]
    return "_".join(parts)


class ResultCache(ABC):
    """Interface the engine reads before every fetch and writes after success."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored payload, or None when absent, stale or corrupt."""

    @abstractmethod
    def put(self, key: str, payload: Any, freshness: Freshness) -> None:
        """Replace the whole value stored under *key*."""


class SessionCache(ResultCache):
    """JSON-serialised cache over a process-lifetime string mapping.

    Entries never outlive the storage they are written to. Entries written
    with ``Freshness.DAILY`` are tagged with the calendar day of the write and
    read as absent once ``today()`` moves past it.

    Usage:
        cache = SessionCache()
        cache.put(cache_key("drivers", 3, "all"), [...], Freshness.DAILY)
    """

    def __init__(
        self,
        storage: MutableMapping[str, str] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._storage: MutableMapping[str, str] = {} if storage is None else storage
        self._today = today

    def get(self, key: str) -> Any | None:
        raw = self._storage.get(key)
        if raw is None:
            return None
        try:
            entry = self._decode(raw)
        except CacheCorruptError as exc:
            logger.warning("Ignoring corrupt cache entry %s: %s", key, exc)
            return None
        if entry["freshness"] == Freshness.DAILY.value and entry.get("day") != self._today().isoformat():
            logger.debug("Cache entry %s is stale", key)
            return None
        return entry["payload"]

    def put(self, key: str, payload: Any, freshness: Freshness) -> None:
        if payload is None:
            raise ValueError("None cannot be cached; it reads back as a miss")
        entry: dict[str, Any] = {"freshness": freshness.value, "payload": payload}
        if freshness is Freshness.DAILY:
            entry["day"] = self._today().isoformat()
        self._storage[key] = json.dumps(entry, separators=(",", ":"))

    def clear(self) -> None:
        self._storage.clear()

    @staticmethod
    def _decode(raw: str) -> dict[str, Any]:
        try:
            entry = json.loads(raw)
        except ValueError as exc:
            raise CacheCorruptError(f"not valid JSON: {exc}") from exc
        if not isinstance(entry, dict) or "payload" not in entry:
            raise CacheCorruptError("missing payload")
        if entry.get("freshness") not in (Freshness.PERMANENT.value, Freshness.DAILY.value):
            raise CacheCorruptError(f"unknown freshness {entry.get('freshness')!r}")
        if entry["payload"] is None:
            raise CacheCorruptError("null payload")
        return entry
