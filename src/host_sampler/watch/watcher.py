"""Watch Loop: log filesystem change notifications for a directory tree.

watchdog's Observer delivers events on its own thread; the handler hands
them to the asyncio loop through a queue, so the Watch Loop suspends only
while waiting for the next event and shares no state with the Sampler Loop.

    Observer thread ──call_soon_threadsafe──▶ asyncio.Queue ──▶ WatchLoop.run()

Setting the stop event (or the observer thread dying) closes the queue and
ends `run()` without error.
"""

import asyncio
import os
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from host_sampler.telemetry import (
    FILE_CHANGED,
    FILE_WRITTEN,
    WATCH_RUNTIME_ERROR,
    WATCH_SETUP_FAILED,
    WATCH_STARTED,
    WATCH_STOPPED,
    get_logger,
)
from host_sampler.watch.errors import SubscriptionRuntimeError, SubscriptionSetupFailed

log = get_logger(__name__)


class ChangeKind(str, Enum):
    """Operation behind a filesystem notification."""

    WRITE = "write"
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    OTHER = "other"


@dataclass(frozen=True)
class FileChangeEvent:
    """One filesystem notification."""

    path: str
    kind: ChangeKind
    dest_path: str | None = None


class _Closed:
    """Queue sentinel: the subscription is finished."""


_CLOSED = _Closed()

QueueItem = FileChangeEvent | SubscriptionRuntimeError | _Closed


def classify_event(event: FileSystemEvent) -> ChangeKind:
    """Map a watchdog event to a ChangeKind.

    Directory modifications (a child changed) are reported as OTHER; only
    file modifications count as writes.
    """
    if event.event_type == EVENT_TYPE_MODIFIED:
        return ChangeKind.OTHER if event.is_directory else ChangeKind.WRITE
    if event.event_type == EVENT_TYPE_CREATED:
        return ChangeKind.CREATE
    if event.event_type == EVENT_TYPE_DELETED:
        return ChangeKind.REMOVE
    if event.event_type == EVENT_TYPE_MOVED:
        return ChangeKind.RENAME
    return ChangeKind.OTHER


def to_change_event(event: FileSystemEvent) -> FileChangeEvent:
    """Convert a watchdog event into a FileChangeEvent."""
    dest = getattr(event, "dest_path", "") or None
    return FileChangeEvent(
        path=os.fsdecode(event.src_path),
        kind=classify_event(event),
        dest_path=os.fsdecode(dest) if dest else None,
    )


class _QueueingHandler(FileSystemEventHandler):
    """Forwards watchdog events from the observer thread into an asyncio queue."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[QueueItem]") -> None:
        super().__init__()
        self._loop = loop
        self._queue = queue

    def on_any_event(self, event: FileSystemEvent) -> None:
        item: QueueItem
        try:
            item = to_change_event(event)
        except Exception as e:
            item = SubscriptionRuntimeError(f"Could not decode {event!r}: {e}")
        self.put(item)

    def put(self, item: QueueItem) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Event loop already closed; nothing left to deliver to
            log.debug("watch_event_dropped", reason="event_loop_closed")


class WatchLoop:
    """Subscribes to change notifications under `path` and logs each one.

    Usage:
        >>> watch = WatchLoop("~/projects")
        >>> watch.start()           # raises SubscriptionSetupFailed
        >>> await watch.run(stop)   # until stop.set()

    Attributes:
        path: Directory being watched.
        recursive: Whether subdirectories are watched too.
        counts: Number of handled events per ChangeKind.
        errors: Number of runtime errors logged.
    """

    def __init__(
        self,
        path: str | Path,
        recursive: bool = True,
        observer_factory: Callable[[], Any] = Observer,
        health_check_seconds: float = 1.0,
    ) -> None:
        self.path = Path(path).expanduser()
        self.recursive = recursive
        self.counts: Counter[ChangeKind] = Counter()
        self.errors = 0
        self._observer_factory = observer_factory
        self._health_check_seconds = health_check_seconds
        self._observer: Any = None
        self._queue: asyncio.Queue[QueueItem] | None = None
        self._handler: _QueueingHandler | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Establish the subscription. Must be called from a running event loop.

        Raises:
            SubscriptionSetupFailed: Path missing, not a directory, or the
                OS refused the watch. There is no retry.
        """
        if self._observer is not None:
            return

        if not self.path.is_dir():
            log.error(WATCH_SETUP_FAILED, path=str(self.path), reason="not_a_directory")
            raise SubscriptionSetupFailed(str(self.path), "no such directory")

        self._queue = asyncio.Queue()
        self._handler = _QueueingHandler(asyncio.get_running_loop(), self._queue)
        observer = self._observer_factory()
        try:
            observer.schedule(self._handler, str(self.path), recursive=self.recursive)
            observer.start()
        except OSError as e:
            log.error(WATCH_SETUP_FAILED, path=str(self.path), error=str(e))
            raise SubscriptionSetupFailed(str(self.path), str(e)) from e

        self._observer = observer
        log.info(WATCH_STARTED, path=str(self.path), recursive=self.recursive)

    def handle(self, item: FileChangeEvent | SubscriptionRuntimeError) -> None:
        """Log one queue item."""
        if isinstance(item, SubscriptionRuntimeError):
            self.errors += 1
            log.warning(WATCH_RUNTIME_ERROR, path=str(self.path), error=str(item))
            return

        self.counts[item.kind] += 1
        if item.kind is ChangeKind.WRITE:
            log.info(FILE_WRITTEN, path=item.path)
        else:
            log.debug(FILE_CHANGED, path=item.path, kind=item.kind.value, dest_path=item.dest_path)

    async def _close_on_stop(self, stop_event: asyncio.Event) -> None:
        await stop_event.wait()
        if self._handler is not None:
            self._handler.put(_CLOSED)

    async def _close_on_observer_exit(self) -> None:
        while self._observer is not None and self._observer.is_alive():
            await asyncio.sleep(self._health_check_seconds)
        log.warning("watch_observer_exited", path=str(self.path))
        if self._handler is not None:
            self._handler.put(_CLOSED)

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """Consume notifications until the subscription is closed.

        Args:
            stop_event: Shared cancellation signal.

        Raises:
            SubscriptionSetupFailed: If the subscription was not started
                yet and cannot be established.
        """
        self.start()
        assert self._queue is not None

        stop_event = stop_event if stop_event is not None else asyncio.Event()
        watchers = [
            asyncio.create_task(self._close_on_stop(stop_event)),
            asyncio.create_task(self._close_on_observer_exit()),
        ]
        try:
            while True:
                item = await self._queue.get()
                if isinstance(item, _Closed):
                    break
                self.handle(item)
        finally:
            for task in watchers:
                task.cancel()
            await asyncio.gather(*watchers, return_exceptions=True)
            self.stop()

    def stop(self) -> None:
        """Stop and join the observer thread."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=5.0)
        log.info(
            WATCH_STOPPED,
            path=str(self.path),
            events={kind.value: n for kind, n in self.counts.items()},
            errors=self.errors,
        )
