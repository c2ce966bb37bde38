from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SnapshotKey:
    """Value-equality identity of the input snapshot behind a report."""

    kind: str
    date_from: date
    date_to: date
    company: Optional[str] = None
    filters: Tuple[Tuple[str, str], ...] = ()
    source_version: Optional[str] = None


class SnapshotCache:
    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[SnapshotKey, Tuple[float, object]] = {}
        self._lock = threading.Lock()

    def get(self, key: SnapshotKey) -> Optional[object]:
        with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return None
            ts, payload = entry
            if self._clock() - ts > self.ttl_seconds:
                self._entries.pop(key, None)
                return None
            return payload

    def set(self, key: SnapshotKey, payload: object) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), payload)

    def get_or_compute(self, key: SnapshotKey, compute: Callable[[], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]
        payload = compute()
        self.set(key, payload)
        return payload

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
