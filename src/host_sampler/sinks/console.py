"""Full-screen live display rendered with rich.

Every snapshot clears the terminal and redraws the whole frame: window,
CPU, memory, GPU and network sections, then the last-updated time.
Metrics whose probe failed this cycle show an inline error instead of
disappearing from the frame.
"""

from collections.abc import Callable

from rich.console import Console

from host_sampler.sensors.probes import CPU_KEY, GPU_KEY, MEMORY_KEY, NETWORK_KEY, WINDOW_KEY
from host_sampler.sensors.types import (
    CpuReading,
    GpuReading,
    MemoryReading,
    MetricSnapshot,
    NetworkRates,
    RateSample,
    Reading,
    WindowInfo,
)
from host_sampler.sinks.base import Sink
from host_sampler.sinks.formatting import format_bytes, format_rate, render_bar

BANNER_WIDTH = 62
TITLE = "Host Monitor - Live Stats"

SECTION_LABELS = {
    WINDOW_KEY: "🪟  Window",
    CPU_KEY: "🖥️  CPU",
    MEMORY_KEY: "💾 RAM",
    GPU_KEY: "🎮 GPU",
    NETWORK_KEY: "📡 Network",
}


def _banner(title: str) -> list[str]:
    return [
        "╔" + "═" * BANNER_WIDTH + "╗",
        "║" + title.center(BANNER_WIDTH) + "║",
        "╚" + "═" * BANNER_WIDTH + "╝",
    ]


class ConsoleSink(Sink):
    """Clear-and-redraw terminal display.

    Args:
        console: rich Console to draw on (stdout by default).
        bar_width: Cells in each percentage bar.
        title: Banner title.
    """

    def __init__(
        self, console: Console | None = None, bar_width: int = 50, title: str = TITLE
    ) -> None:
        self.console = console or Console()
        self.bar_width = bar_width
        self.title = title
        self._renderers: dict[str, Callable[[Reading | None], list[str]]] = {
            WINDOW_KEY: self._render_window,
            CPU_KEY: self._render_cpu,
            MEMORY_KEY: self._render_memory,
            GPU_KEY: self._render_gpu,
            NETWORK_KEY: self._render_network,
        }

    def emit(self, snapshot: MetricSnapshot) -> None:
        self.console.clear()
        self.console.print(self.render_frame(snapshot), markup=False, highlight=False)

    def render_frame(self, snapshot: MetricSnapshot) -> str:
        """Build the full text frame for one snapshot."""
        lines = _banner(self.title)
        lines.append("")

        for key in snapshot.keys:
            if snapshot.failed(key):
                label = SECTION_LABELS.get(key, key)
                lines.append(f"{label}: Error - {snapshot.failures[key]}")
            else:
                renderer = self._renderers.get(key, lambda r, k=key: [f"{k}: {r}"])
                lines.extend(renderer(snapshot.get(key)))
            lines.append("")

        local_time = snapshot.taken_at.astimezone()
        lines.append(f"⏱️  Last updated: {local_time.strftime('%H:%M:%S')}")
        lines.append("")
        lines.append("[Press Ctrl+C to exit]")
        return "\n".join(lines)

    def _bar(self, percent: float) -> str:
        return f"   [{render_bar(percent, self.bar_width)}]"

    def _render_window(self, reading: Reading | None) -> list[str]:
        if not isinstance(reading, WindowInfo):
            return [f"{SECTION_LABELS[WINDOW_KEY]}: N/A"]
        title = reading.window_title or "(no title)"
        return [f"{SECTION_LABELS[WINDOW_KEY]}: {reading.app_name} | {title}"]

    def _render_cpu(self, reading: Reading | None) -> list[str]:
        if not isinstance(reading, CpuReading):
            return [f"{SECTION_LABELS[CPU_KEY]}: N/A"]
        return [
            f"{SECTION_LABELS[CPU_KEY]} Usage: {reading.percent:.2f}% "
            f"({reading.logical_cores} cores)",
            self._bar(reading.percent),
        ]

    def _render_memory(self, reading: Reading | None) -> list[str]:
        if not isinstance(reading, MemoryReading):
            return [f"{SECTION_LABELS[MEMORY_KEY]}: N/A"]
        return [
            f"{SECTION_LABELS[MEMORY_KEY]} Usage: {reading.percent:.2f}% "
            f"(Used: {format_bytes(reading.used_bytes)} / "
            f"Total: {format_bytes(reading.total_bytes)})",
            self._bar(reading.percent),
        ]

    def _render_gpu(self, reading: Reading | None) -> list[str]:
        if not isinstance(reading, GpuReading):
            return [f"{SECTION_LABELS[GPU_KEY]}: N/A"]
        return [f"{SECTION_LABELS[GPU_KEY]}: {reading.label}"]

    def _render_network(self, reading: Reading | None) -> list[str]:
        lines = [f"{SECTION_LABELS[NETWORK_KEY]} Usage:"]
        if reading is None:
            lines.append("  (Calculating...)")
        elif isinstance(reading, NetworkRates):
            lines.append(f"  ↑ Upload:   {format_rate(reading.upload_per_second)}")
            lines.append(f"  ↓ Download: {format_rate(reading.download_per_second)}")
        elif isinstance(reading, RateSample):
            lines.append(f"  {format_rate(reading.value_per_second)}")
        return lines
