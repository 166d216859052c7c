"""macOS probes that shell out to platform tools.

- ActiveWindowProbe: frontmost application and window title via AppleScript
  (`osascript`). Requires the Accessibility permission for the terminal;
  without it System Events still reports the app name but not the title.
- GpuProbe: GPU presence via the IORegistry (`ioreg`). Detailed GPU load
  needs powermetrics with sudo, so only presence is reported.
"""

import platform
import subprocess

from host_sampler.sensors.errors import (
    ProbeExecutionFailed,
    ProbeParseFailed,
    ProbeUnavailable,
)
from host_sampler.sensors.probes import GPU_KEY, WINDOW_KEY, Clock, Probe
from host_sampler.sensors.types import GpuReading, GpuStatus, WindowInfo
from host_sampler.telemetry import get_logger

log = get_logger(__name__)

FRONT_WINDOW_SCRIPT = """
tell application "System Events"
    set frontApp to first application process whose frontmost is true
    set frontAppName to name of frontApp
    set windowTitle to ""
    try
        set windowTitle to name of window 1 of frontApp
    end try
    return frontAppName & "," & windowTitle
end tell
"""

IOREG_GPU_COMMAND = ["ioreg", "-r", "-d", "1", "-w", "0", "-c", "IOAccelerator"]


def is_macos() -> bool:
    """Check if running on macOS.

    Returns:
        True on Darwin (Intel or Apple Silicon), False otherwise.
    """
    return platform.system() == "Darwin"


def parse_window_output(output: str, key: str = WINDOW_KEY) -> WindowInfo:
    """Parse `"<appName>,<windowTitle>"` into a WindowInfo.

    Splits on the first comma only, so titles may contain commas. A missing
    title is an empty string, not an error.

    Raises:
        ProbeParseFailed: If the output carries no application name.
    """
    text = output.strip()
    app_name, _, window_title = text.partition(",")
    if not app_name:
        raise ProbeParseFailed(key, f"No application name in output: {output!r}")
    return WindowInfo(app_name=app_name, window_title=window_title)


class ActiveWindowProbe(Probe):
    """Foreground application name and active window title."""

    key = WINDOW_KEY

    def __init__(self, timeout_seconds: float | None = 10.0, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.timeout_seconds = timeout_seconds

    def sample(self) -> WindowInfo:
        if not is_macos():
            raise ProbeUnavailable(self.key, "Window identity requires macOS (osascript)")

        try:
            result = subprocess.run(
                ["osascript", "-e", FRONT_WINDOW_SCRIPT],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as e:
            raise ProbeUnavailable(self.key, "osascript command not found") from e
        except subprocess.TimeoutExpired as e:
            raise ProbeExecutionFailed(
                self.key, f"osascript timed out after {self.timeout_seconds}s"
            ) from e
        except OSError as e:
            raise ProbeExecutionFailed(self.key, f"failed to run AppleScript: {e}") from e

        if result.returncode != 0:
            stderr_preview = (result.stderr or "").strip()[:200]
            raise ProbeExecutionFailed(
                self.key,
                f"failed to run AppleScript: exit status {result.returncode}: {stderr_preview}",
            )

        return parse_window_output(result.stdout, self.key)


class GpuProbe(Probe):
    """GPU presence classification from the IORegistry.

    Never raises for command failures: the reading itself carries the
    classification, so the display always shows one of the fixed labels.
    Any failure to run ioreg (missing binary, timeout, non-zero exit) is
    ERROR; only a clean run without an accelerator is NOT_AVAILABLE.
    """

    key = GPU_KEY

    def __init__(self, timeout_seconds: float | None = 10.0, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.timeout_seconds = timeout_seconds

    def sample(self) -> GpuReading:
        if not is_macos():
            return GpuReading(status=GpuStatus.NOT_AVAILABLE)

        try:
            result = subprocess.run(
                IOREG_GPU_COMMAND,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            log.debug("ioreg_failed", error=str(e), error_type=type(e).__name__)
            return GpuReading(status=GpuStatus.ERROR)

        if result.returncode != 0:
            log.debug(
                "ioreg_failed",
                returncode=result.returncode,
                stderr=(result.stderr or "")[:200] or None,
            )
            return GpuReading(status=GpuStatus.ERROR)

        if "IOAccelerator" in result.stdout:
            return GpuReading(status=GpuStatus.ACTIVE)
        return GpuReading(status=GpuStatus.NOT_AVAILABLE)
