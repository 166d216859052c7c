"""Platform-specific probe implementations.

- base.py: psutil probes that work everywhere psutil does
- apple.py: macOS probes that shell out to osascript and ioreg
"""

from host_sampler.sensors.platforms.apple import (
    ActiveWindowProbe,
    GpuProbe,
    is_macos,
    parse_window_output,
)
from host_sampler.sensors.platforms.base import CpuProbe, MemoryProbe, NetworkProbe

__all__ = [
    "ActiveWindowProbe",
    "GpuProbe",
    "CpuProbe",
    "MemoryProbe",
    "NetworkProbe",
    "is_macos",
    "parse_window_output",
]
