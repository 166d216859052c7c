"""Filesystem Watch Loop (independent of the Sampler Loop)."""

from host_sampler.watch.errors import (
    SubscriptionError,
    SubscriptionRuntimeError,
    SubscriptionSetupFailed,
)
from host_sampler.watch.watcher import ChangeKind, FileChangeEvent, WatchLoop, classify_event

__all__ = [
    "WatchLoop",
    "ChangeKind",
    "FileChangeEvent",
    "classify_event",
    "SubscriptionError",
    "SubscriptionSetupFailed",
    "SubscriptionRuntimeError",
]
