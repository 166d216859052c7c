"""Data types produced by probes and consumed by the sampler and sinks.

- Observation: one timestamped cumulative counter reading
- RateSample: per-second rate derived from two consecutive Observations
- WindowInfo, CpuReading, MemoryReading, GpuReading: instantaneous readings
- NetworkRates: per-second upload/download summed over active interfaces
- MetricSnapshot: everything gathered in one Sampler Loop cycle
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from host_sampler.sensors.errors import ProbeError

CounterValue = Union[int, Mapping[str, int]]


@dataclass(frozen=True)
class Observation:
    """One cumulative counter reading.

    Attributes:
        key: Delta-state key (e.g. "network/en0").
        timestamp: Monotonic clock reading in seconds.
        value: A single counter or a record of named counters.
    """

    key: str
    timestamp: float
    value: CounterValue


@dataclass(frozen=True)
class RateSample:
    """Per-second rate derived from two Observations of the same key.

    Attributes:
        key: Delta-state key the rate belongs to.
        value_per_second: Total rate, summed across components for records.
        interval_seconds: Time between the two observations.
        delta: Total counter increase over the interval.
        component_rates: Per-field rates when the observation is a record.
    """

    key: str
    value_per_second: float
    interval_seconds: float
    delta: int = 0
    component_rates: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WindowInfo:
    """Foreground application and its active window title."""

    app_name: str
    window_title: str = ""


@dataclass(frozen=True)
class CpuReading:
    """CPU utilization in [0, 100] and logical core count."""

    percent: float
    logical_cores: int


@dataclass(frozen=True)
class MemoryReading:
    """Virtual memory usage."""

    used_bytes: int
    total_bytes: int
    percent: float


class GpuStatus(str, Enum):
    """GPU presence classification (no numeric load is ever reported)."""

    ACTIVE = "active"
    NOT_AVAILABLE = "not_available"
    ERROR = "error"


GPU_STATUS_LABELS = {
    GpuStatus.ACTIVE: "Active (detailed stats require powermetrics with sudo)",
    GpuStatus.NOT_AVAILABLE: "N/A",
    GpuStatus.ERROR: "N/A (requires Metal-compatible GPU)",
}


@dataclass(frozen=True)
class GpuReading:
    """GPU presence reading."""

    status: GpuStatus

    @property
    def label(self) -> str:
        return GPU_STATUS_LABELS[self.status]


@dataclass(frozen=True)
class NetworkRates:
    """Upload/download rates summed across interfaces active in one interval."""

    upload_per_second: float
    download_per_second: float
    active_interfaces: tuple[str, ...] = ()


Reading = Union[WindowInfo, CpuReading, MemoryReading, GpuReading, NetworkRates, RateSample]


@dataclass
class MetricSnapshot:
    """All metrics gathered in one Sampler Loop cycle.

    Attributes:
        taken_at: Wall-clock time the cycle started.
        readings: Probe key -> reading. None means a rate is still warming
            up (first observation for that key).
        failures: Probe key -> error raised during this cycle.
        order: Probe keys in the order the probes were configured.
    """

    taken_at: datetime
    readings: dict[str, Reading | None] = field(default_factory=dict)
    failures: dict[str, ProbeError] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        """Every key with a reading or a failure, in probe order."""
        extra = [k for k in [*self.readings, *self.failures] if k not in self.order]
        return [*self.order, *dict.fromkeys(extra)]

    def get(self, key: str) -> Reading | None:
        return self.readings.get(key)

    def failed(self, key: str) -> bool:
        return key in self.failures

    def to_dict(self) -> dict[str, Any]:
        """Flatten the snapshot into log-friendly fields."""
        fields: dict[str, Any] = {"taken_at": self.taken_at.isoformat()}
        for key, reading in self.readings.items():
            if isinstance(reading, WindowInfo):
                fields["app"] = reading.app_name
                fields["title"] = reading.window_title
            elif isinstance(reading, CpuReading):
                fields["cpu_percent"] = round(reading.percent, 2)
                fields["cpu_cores"] = reading.logical_cores
            elif isinstance(reading, MemoryReading):
                fields["mem_percent"] = round(reading.percent, 2)
                fields["mem_used_bytes"] = reading.used_bytes
                fields["mem_total_bytes"] = reading.total_bytes
            elif isinstance(reading, GpuReading):
                fields["gpu"] = reading.status.value
            elif isinstance(reading, NetworkRates):
                fields["net_upload_bps"] = round(reading.upload_per_second, 2)
                fields["net_download_bps"] = round(reading.download_per_second, 2)
                fields["net_interfaces"] = list(reading.active_interfaces)
            elif isinstance(reading, RateSample):
                fields[f"{key}_per_second"] = round(reading.value_per_second, 2)
            elif reading is None:
                fields[key] = "calculating"
        for key in self.failures:
            fields[key] = "N/A"
        if self.failures:
            fields["failures"] = {
                key: f"{err.kind.value}: {err}" for key, err in self.failures.items()
            }
        return fields
