"""Tests for the Watch Loop."""

import asyncio
import threading
from pathlib import Path
from unittest.mock import patch

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from host_sampler.watch import (
    ChangeKind,
    FileChangeEvent,
    SubscriptionRuntimeError,
    SubscriptionSetupFailed,
    WatchLoop,
    classify_event,
)
from host_sampler.watch.watcher import to_change_event


class FakeObserver:
    """Observer double: records the scheduled handler, no real thread."""

    def __init__(self, schedule_error: Exception | None = None) -> None:
        self.handler = None
        self.path = None
        self.recursive = None
        self.started = False
        self.stopped = False
        self.joined = False
        self.alive = True
        self._schedule_error = schedule_error

    def schedule(self, handler, path, recursive=False):
        if self._schedule_error:
            raise self._schedule_error
        self.handler = handler
        self.path = path
        self.recursive = recursive

    def start(self) -> None:
        self.started = True

    def is_alive(self) -> bool:
        return self.alive and not self.stopped

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout=None) -> None:
        self.joined = True


async def wait_until(predicate, timeout: float = 2.0) -> None:
    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout)


class TestClassifyEvent:
    """Test watchdog event classification."""

    @pytest.mark.parametrize(
        "event,kind",
        [
            (FileModifiedEvent("/w/a.txt"), ChangeKind.WRITE),
            (DirModifiedEvent("/w"), ChangeKind.OTHER),
            (FileCreatedEvent("/w/a.txt"), ChangeKind.CREATE),
            (FileDeletedEvent("/w/a.txt"), ChangeKind.REMOVE),
            (FileMovedEvent("/w/a.txt", "/w/b.txt"), ChangeKind.RENAME),
            (FileClosedEvent("/w/a.txt"), ChangeKind.OTHER),
        ],
    )
    def test_kinds(self, event, kind: ChangeKind) -> None:
        assert classify_event(event) is kind

    def test_move_keeps_destination(self) -> None:
        change = to_change_event(FileMovedEvent("/w/a.txt", "/w/b.txt"))
        assert change == FileChangeEvent("/w/a.txt", ChangeKind.RENAME, "/w/b.txt")

    def test_bytes_paths_decoded(self) -> None:
        change = to_change_event(FileModifiedEvent(b"/w/a.txt"))
        assert change.path == "/w/a.txt"
        assert change.dest_path is None


@pytest.mark.asyncio
class TestSetup:
    """Test subscription establishment."""

    async def test_missing_directory(self, tmp_path: Path) -> None:
        watch = WatchLoop(tmp_path / "nope", observer_factory=FakeObserver)

        with pytest.raises(SubscriptionSetupFailed) as exc_info:
            watch.start()

        assert "nope" in str(exc_info.value)
        assert not watch.running

    async def test_file_instead_of_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(SubscriptionSetupFailed):
            WatchLoop(target, observer_factory=FakeObserver).start()

    async def test_os_refuses_watch(self, tmp_path: Path) -> None:
        watch = WatchLoop(
            tmp_path,
            observer_factory=lambda: FakeObserver(OSError("inotify watch limit reached")),
        )

        with pytest.raises(SubscriptionSetupFailed, match="inotify watch limit"):
            watch.start()

    async def test_schedules_observer(self, tmp_path: Path) -> None:
        observers: list[FakeObserver] = []

        def factory() -> FakeObserver:
            observers.append(FakeObserver())
            return observers[-1]

        watch = WatchLoop(tmp_path, recursive=False, observer_factory=factory)
        watch.start()
        watch.start()

        assert len(observers) == 1
        assert observers[0].started
        assert observers[0].path == str(tmp_path)
        assert observers[0].recursive is False
        assert watch.running

        watch.stop()
        assert observers[0].stopped and observers[0].joined
        assert not watch.running

    async def test_run_without_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SubscriptionSetupFailed):
            await WatchLoop(tmp_path / "missing", observer_factory=FakeObserver).run()


@pytest.mark.asyncio
class TestRun:
    """Test event consumption and shutdown."""

    async def test_events_handled_until_stop(self, tmp_path: Path) -> None:
        observer = FakeObserver()
        watch = WatchLoop(tmp_path, observer_factory=lambda: observer)
        stop = asyncio.Event()
        watch.start()

        task = asyncio.create_task(watch.run(stop))

        def deliver() -> None:
            observer.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.txt")))
            observer.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.txt")))
            observer.handler.dispatch(FileCreatedEvent(str(tmp_path / "b.txt")))

        # Delivered from a foreign thread, like the real observer
        thread = threading.Thread(target=deliver)
        thread.start()
        thread.join()

        await wait_until(lambda: sum(watch.counts.values()) == 3)
        stop.set()
        await asyncio.wait_for(task, timeout=2.0)

        assert watch.counts[ChangeKind.WRITE] == 2
        assert watch.counts[ChangeKind.CREATE] == 1
        assert observer.stopped
        assert not watch.running

    async def test_runtime_error_does_not_stop_loop(self, tmp_path: Path) -> None:
        observer = FakeObserver()
        watch = WatchLoop(tmp_path, observer_factory=lambda: observer)
        stop = asyncio.Event()
        watch.start()
        task = asyncio.create_task(watch.run(stop))

        with patch(
            "host_sampler.watch.watcher.to_change_event", side_effect=ValueError("bad path")
        ):
            observer.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.txt")))
        observer.handler.dispatch(FileModifiedEvent(str(tmp_path / "c.txt")))

        await wait_until(lambda: watch.errors == 1 and watch.counts[ChangeKind.WRITE] == 1)
        assert not task.done()

        stop.set()
        await asyncio.wait_for(task, timeout=2.0)

    async def test_observer_death_ends_run(self, tmp_path: Path) -> None:
        observer = FakeObserver()
        watch = WatchLoop(
            tmp_path, observer_factory=lambda: observer, health_check_seconds=0.01
        )

        task = asyncio.create_task(watch.run(asyncio.Event()))
        await wait_until(lambda: watch.running)
        observer.alive = False

        await asyncio.wait_for(task, timeout=2.0)
        assert not watch.running

    async def test_preset_stop_event(self, tmp_path: Path) -> None:
        stop = asyncio.Event()
        stop.set()
        watch = WatchLoop(tmp_path, observer_factory=FakeObserver)

        await asyncio.wait_for(watch.run(stop), timeout=2.0)

        assert sum(watch.counts.values()) == 0

    def test_handle_logs_without_loop(self, tmp_path: Path) -> None:
        watch = WatchLoop(tmp_path, observer_factory=FakeObserver)

        watch.handle(FileChangeEvent(str(tmp_path / "a"), ChangeKind.WRITE))
        watch.handle(FileChangeEvent(str(tmp_path / "a"), ChangeKind.REMOVE))
        watch.handle(SubscriptionRuntimeError("queue overflow"))

        assert watch.counts == {ChangeKind.WRITE: 1, ChangeKind.REMOVE: 1}
        assert watch.errors == 1


@pytest.mark.asyncio
async def test_real_observer_reports_write(tmp_path: Path) -> None:
    """End to end with watchdog's platform observer."""
    watch = WatchLoop(tmp_path, health_check_seconds=0.05)
    stop = asyncio.Event()
    watch.start()
    task = asyncio.create_task(watch.run(stop))

    await asyncio.sleep(0.2)
    (tmp_path / "notes.txt").write_text("hello")

    try:
        await wait_until(lambda: watch.counts[ChangeKind.WRITE] >= 1, timeout=5.0)
    finally:
        stop.set()
        await asyncio.wait_for(task, timeout=5.0)
