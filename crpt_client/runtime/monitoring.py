"""Dispatch counters and snapshot aggregation."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field


@dataclass
class DispatchSnapshot:
    uptime_seconds: float
    accepted: int
    released: int
    completed: int
    internal_errors: int
    abandoned: int
    windows: int
    max_released_per_window: int
    queue_depth: int
    rejected: dict[str, int] = field(default_factory=dict)


class DispatchMetrics:
    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = started_at or time.time()
        self._lock = threading.Lock()
        self.accepted = 0
        self.released = 0
        self.completed = 0
        self.internal_errors = 0
        self.abandoned = 0
        self.windows = 0
        self.max_released_per_window = 0
        self.rejected: dict[str, int] = {}

    def record_accepted(self) -> None:
        with self._lock:
            self.accepted += 1

    def record_rejected(self, code: str) -> None:
        with self._lock:
            self.rejected[code] = self.rejected.get(code, 0) + 1

    def record_window(self, released: int) -> None:
        with self._lock:
            self.windows += 1
            self.released += released
            self.max_released_per_window = max(self.max_released_per_window, released)

    def record_completed(self, internal_error: bool = False) -> None:
        with self._lock:
            self.completed += 1
            if internal_error:
                self.internal_errors += 1

    def record_abandoned(self, count: int) -> None:
        with self._lock:
            self.abandoned += max(0, count)

    def snapshot(self, queue_depth: int = 0) -> DispatchSnapshot:
        with self._lock:
            return DispatchSnapshot(
                uptime_seconds=max(0.0, time.time() - self.started_at),
                accepted=self.accepted,
                released=self.released,
                completed=self.completed,
                internal_errors=self.internal_errors,
                abandoned=self.abandoned,
                windows=self.windows,
                max_released_per_window=self.max_released_per_window,
                queue_depth=queue_depth,
                rejected=dict(self.rejected),
            )
