"""Cross-platform probes using psutil.

CPU, memory and per-interface network counters work on every platform
psutil supports. psutil errors are normalized into ProbeError subclasses so
the Sampler Loop handles them the same way as subprocess failures.
"""

import psutil

from host_sampler.sensors.errors import ProbeExecutionFailed, ProbeParseFailed
from host_sampler.sensors.probes import (
    CPU_KEY,
    MEMORY_KEY,
    NETWORK_KEY,
    Clock,
    Probe,
)
from host_sampler.sensors.types import CpuReading, MemoryReading, Observation
from host_sampler.telemetry import get_logger

log = get_logger(__name__)


class CpuProbe(Probe):
    """System-wide CPU utilization.

    psutil measures utilization over `sample_seconds`, blocking the calling
    thread for that long. With 0 it compares against the previous call,
    which makes the very first reading meaningless.
    """

    key = CPU_KEY

    def __init__(self, sample_seconds: float = 1.0, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.sample_seconds = sample_seconds

    def sample(self) -> CpuReading:
        try:
            percent = psutil.cpu_percent(interval=self.sample_seconds or None)
            cores = psutil.cpu_count(logical=True)
        except (OSError, psutil.Error) as e:
            raise ProbeExecutionFailed(self.key, f"cpu_percent failed: {e}") from e

        if not isinstance(percent, (int, float)) or not 0.0 <= percent <= 100.0:
            raise ProbeParseFailed(self.key, f"CPU percentage out of range: {percent!r}")

        return CpuReading(percent=float(percent), logical_cores=cores or 0)


class MemoryProbe(Probe):
    """Virtual memory usage (used/total bytes and percentage)."""

    key = MEMORY_KEY

    def sample(self) -> MemoryReading:
        try:
            vm = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise ProbeExecutionFailed(self.key, f"virtual_memory failed: {e}") from e

        if vm.total <= 0:
            raise ProbeParseFailed(self.key, f"Total memory reported as {vm.total}")

        return MemoryReading(used_bytes=vm.used, total_bytes=vm.total, percent=vm.percent)


class NetworkProbe(Probe):
    """Per-interface cumulative byte counters.

    Returns one Observation per interface keyed `network/<name>`; the
    counters are cumulative since interface initialization, so they only
    become rates after passing through the Delta Engine.
    """

    key = NETWORK_KEY

    def sample(self) -> list[Observation]:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except (OSError, psutil.Error) as e:
            raise ProbeExecutionFailed(self.key, f"net_io_counters failed: {e}") from e

        now = self.clock()
        observations = [
            Observation(
                key=f"{self.key}/{name}",
                timestamp=now,
                value={"bytes_sent": stats.bytes_sent, "bytes_recv": stats.bytes_recv},
            )
            for name, stats in sorted(counters.items())
        ]
        log.debug("network_counters_sampled", interfaces=len(observations))
        return observations
