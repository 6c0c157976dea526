"""Fixed-window dispatch engine: bounded queue, periodic release and a single execution lane."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Literal, TypeVar

from crpt_client.runtime.monitoring import DispatchMetrics, DispatchSnapshot

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)
FailureKind = Literal["CLIENT_CLOSED", "REQUEST_LIMIT_EXCEEDED", "INTERNAL_ERROR"]
DEFAULT_QUEUE_LIMIT = 1000
DEFAULT_GRACE_SECONDS = 5.0
CLOSED_MESSAGE = "API client was closed."
QUEUE_FULL_MESSAGE = "Request queue is full."


class ConfigurationError(ValueError):
    code = "INVALID_CONFIGURATION"


@dataclass(frozen=True)
class RateWindow:
    """At most ``limit`` releases per ``interval_seconds``."""

    limit: int
    interval_seconds: float

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit <= 0:
            raise ConfigurationError("Request limit must be a positive integer.")
        interval = self.interval_seconds
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
            raise ConfigurationError("Window interval must be a positive duration.")


@dataclass
class WorkItem(Generic[T]):
    call: Callable[..., T]
    args: tuple[Any, ...] = ()
    handle: Future = field(default_factory=Future)


def completed(value: T) -> Future:
    """Return a handle that is already resolved with ``value``."""
    handle: Future = Future()
    handle.set_result(value)
    return handle


class DispatchEngine(Generic[T]):
    """Releases queued work into one serialized lane, ``window.limit`` items per tick.

    ``submit`` never blocks: a closed engine or a full queue yields a handle that is
    already resolved with ``failure(kind, message)``. Every accepted handle resolves
    exactly once with whatever the submitted call returns, or with an
    ``INTERNAL_ERROR`` failure if it raises. Shutdown resolves work that never reached
    the lane with ``CLIENT_CLOSED``.
    """

    def __init__(
        self,
        window: RateWindow,
        failure: Callable[[FailureKind, str], T],
        queue_limit: int = DEFAULT_QUEUE_LIMIT,
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
        metrics: DispatchMetrics | None = None,
        name: str = "dispatch",
    ) -> None:
        if isinstance(queue_limit, bool) or not isinstance(queue_limit, int) or queue_limit <= 0:
            raise ConfigurationError("Queue limit must be a positive integer.")
        self.window = window
        self.queue_limit = queue_limit
        self.grace_seconds = max(0.0, grace_seconds)
        self.metrics = metrics or DispatchMetrics()
        self.name = name
        self._failure = failure
        # Guards the queue, the lane bookkeeping and the closed flag together.
        self._lock = threading.RLock()
        self._closed = False
        self._queue: deque[WorkItem[T]] = deque()
        self._in_lane: dict[Future, WorkItem[T]] = {}
        self._stop_event = threading.Event()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{name}-lane")
        self._scheduler = threading.Thread(target=self._run, name=f"{name}-scheduler", daemon=True)
        self._scheduler.start()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def queue_depth(self) -> int:
        with self._lock:
            return len(self._queue)

    def stats(self) -> DispatchSnapshot:
        return self.metrics.snapshot(queue_depth=self.queue_depth)

    def submit(self, call: Callable[..., T], *args: Any) -> Future:
        with self._lock:
            if self._closed:
                kind: FailureKind | None = "CLIENT_CLOSED"
            elif len(self._queue) >= self.queue_limit:
                kind = "REQUEST_LIMIT_EXCEEDED"
            else:
                kind = None
                item = WorkItem(call=call, args=args)
                self._queue.append(item)

        if kind is None:
            self.metrics.record_accepted()
            return item.handle

        self.metrics.record_rejected(kind)
        LOGGER.warning(
            "submission rejected: engine=%s code=%s queue_limit=%s",
            self.name,
            kind,
            self.queue_limit,
        )
        message = CLOSED_MESSAGE if kind == "CLIENT_CLOSED" else QUEUE_FULL_MESSAGE
        return completed(self._failure(kind, message))

    def shutdown(self) -> bool:
        """Stop the engine; only the first caller performs the transition.

        Returns True for the caller that closed the engine and False for every
        later or concurrent caller.
        """
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            queued = list(self._queue)
            self._queue.clear()
            lane = dict(self._in_lane)

        started = time.monotonic()
        self._stop_event.set()
        self._executor.shutdown(wait=False)
        abandoned = sum(1 for item in queued if self._abandon(item))
        LOGGER.info(
            "dispatch engine shutting down: engine=%s abandoned_queued=%s in_lane=%s grace_seconds=%s",
            self.name,
            abandoned,
            len(lane),
            self.grace_seconds,
        )

        self._scheduler.join(timeout=self.grace_seconds)
        remaining = max(0.0, self.grace_seconds - (time.monotonic() - started))
        _, not_done = wait(list(lane), timeout=remaining)

        forced = 0
        for lane_future in not_done:
            if lane_future.cancel() and self._abandon(lane[lane_future]):
                forced += 1
        if not_done:
            LOGGER.warning(
                "grace period elapsed: engine=%s cancelled=%s still_running=%s",
                self.name,
                forced,
                len(not_done) - forced,
            )
        self.metrics.record_abandoned(abandoned + forced)
        return True

    def close(self) -> None:
        self.shutdown()

    def __enter__(self) -> DispatchEngine[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _run(self) -> None:
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self._release_window()
            except Exception:
                LOGGER.exception("release tick failed: engine=%s", self.name)
            next_tick += self.window.interval_seconds
            remaining = next_tick - time.monotonic()
            while remaining > 0 and not self._stop_event.wait(remaining):
                remaining = next_tick - time.monotonic()

    def _release_window(self) -> int:
        released = 0
        with self._lock:
            if self._closed:
                return 0
            while released < self.window.limit and self._queue:
                item = self._queue.popleft()
                lane_future = self._executor.submit(self._execute, item)
                self._in_lane[lane_future] = item
                lane_future.add_done_callback(self._leave_lane)
                released += 1
        self.metrics.record_window(released)
        if released:
            LOGGER.debug("window released: engine=%s released=%s", self.name, released)
        return released

    def _leave_lane(self, lane_future: Future) -> None:
        with self._lock:
            self._in_lane.pop(lane_future, None)

    def _execute(self, item: WorkItem[T]) -> None:
        if not item.handle.set_running_or_notify_cancel():
            LOGGER.info("work item cancelled before execution: engine=%s", self.name)
            return
        internal_error = False
        try:
            result = item.call(*item.args)
        except Exception as error:
            internal_error = True
            LOGGER.exception("work item failed unexpectedly: engine=%s", self.name)
            result = self._failure("INTERNAL_ERROR", f"Internal error: {error}")
        item.handle.set_result(result)
        self.metrics.record_completed(internal_error=internal_error)

    def _abandon(self, item: WorkItem[T]) -> bool:
        if not item.handle.set_running_or_notify_cancel():
            return False
        item.handle.set_result(self._failure("CLIENT_CLOSED", CLOSED_MESSAGE))
        return True
