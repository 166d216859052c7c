"""Probe contract, reading types and platform probes.

Structure:
- probes.py: Probe base class, ProbeSet, probe keys
- types.py: Observation, RateSample, readings, MetricSnapshot
- errors.py: ProbeError taxonomy
- platforms/: psutil and macOS implementations
"""

from host_sampler.sensors.errors import (
    ProbeError,
    ProbeErrorKind,
    ProbeExecutionFailed,
    ProbeParseFailed,
    ProbeUnavailable,
)
from host_sampler.sensors.probes import (
    CPU_KEY,
    GPU_KEY,
    MEMORY_KEY,
    NETWORK_KEY,
    WINDOW_KEY,
    Probe,
    ProbeReading,
    ProbeSet,
)
from host_sampler.sensors.types import (
    CpuReading,
    GpuReading,
    GpuStatus,
    MemoryReading,
    MetricSnapshot,
    NetworkRates,
    Observation,
    RateSample,
    WindowInfo,
)

__all__ = [
    "Probe",
    "ProbeSet",
    "ProbeReading",
    "ProbeError",
    "ProbeErrorKind",
    "ProbeExecutionFailed",
    "ProbeParseFailed",
    "ProbeUnavailable",
    "Observation",
    "RateSample",
    "WindowInfo",
    "CpuReading",
    "MemoryReading",
    "GpuReading",
    "GpuStatus",
    "NetworkRates",
    "MetricSnapshot",
    "WINDOW_KEY",
    "CPU_KEY",
    "MEMORY_KEY",
    "GPU_KEY",
    "NETWORK_KEY",
]
