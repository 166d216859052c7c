"""Probe contract.

A Probe returns one raw reading of a named metric domain per call. Probes
are synchronous and may block (psutil's CPU window, subprocess calls); the
Sampler Loop runs them in a worker thread.

Platform implementations live in `sensors/platforms/`:
- `base.py`: cross-platform psutil probes (CPU, memory, network counters)
- `apple.py`: macOS probes that shell out (osascript, ioreg)
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from typing import Union

from host_sampler.sensors.types import (
    CpuReading,
    GpuReading,
    MemoryReading,
    Observation,
    WindowInfo,
)

WINDOW_KEY = "window"
CPU_KEY = "cpu"
MEMORY_KEY = "memory"
GPU_KEY = "gpu"
NETWORK_KEY = "network"

ProbeReading = Union[
    WindowInfo, CpuReading, MemoryReading, GpuReading, Observation, list[Observation]
]

Clock = Callable[[], float]


class Probe(ABC):
    """A capability that yields one OS-level measurement per call.

    Subclasses set `key` and implement `sample()`. A list of Observations
    is returned by probes that report several cumulative counters at once
    (one per network interface); the Sampler Loop feeds each through the
    Delta Engine and aggregates the rates under the probe's key.

    Attributes:
        key: Stable name of the metric domain, used in snapshots and logs.
        clock: Monotonic clock used to timestamp Observations.
    """

    key: str = ""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock: Clock = clock or time.monotonic

    @abstractmethod
    def sample(self) -> ProbeReading:
        """Take one reading.

        Raises:
            ProbeError: If the reading cannot be obtained.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


class ProbeSet:
    """Ordered, key-addressable collection of probes.

    Probes keep the order they were given in; the Sampler Loop invokes them
    in that order every cycle.
    """

    def __init__(self, probes: Iterable[Probe]) -> None:
        self._probes: dict[str, Probe] = {}
        for probe in probes:
            if not probe.key:
                raise ValueError(f"{probe!r} has no key")
            if probe.key in self._probes:
                raise ValueError(f"Duplicate probe key: {probe.key}")
            self._probes[probe.key] = probe

    def __iter__(self) -> Iterator[Probe]:
        return iter(self._probes.values())

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, key: object) -> bool:
        return key in self._probes

    @property
    def keys(self) -> list[str]:
        return list(self._probes)

    def sample(self, key: str) -> ProbeReading:
        """Invoke the probe registered under `key`.

        Raises:
            KeyError: If no probe has that key.
            ProbeError: If the probe fails.
        """
        return self._probes[key].sample()
