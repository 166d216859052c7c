"""CLI interface for the host sampler.

This module provides a Typer-based command-line interface for the resource
monitor, the window-title poller and the filesystem Watch Loop.
"""

import asyncio
import signal
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from host_sampler.config import AppConfig, get_settings
from host_sampler.sampler import DeltaEngine, DeltaState, SamplerLoop
from host_sampler.sensors import Probe
from host_sampler.sensors.platforms import (
    ActiveWindowProbe,
    CpuProbe,
    GpuProbe,
    MemoryProbe,
    NetworkProbe,
    is_macos,
)
from host_sampler.sinks import ConsoleSink, LogSink, Sink
from host_sampler.telemetry import get_logger, set_console_level
from host_sampler.watch import SubscriptionSetupFailed, WatchLoop

app = typer.Typer(help="Host sampler - live window, CPU, memory, GPU and network stats")
console = Console()
log = get_logger(__name__)

Runner = Callable[[asyncio.Event], Awaitable[None]]


def load_config() -> AppConfig:
    """Settings for a command. Debug mode turns console logging up to DEBUG."""
    config = get_settings()
    if config.debug:
        set_console_level("DEBUG")
    return config


def build_monitor_probes(config: AppConfig) -> list[Probe]:
    """Probes of the resource monitor, in display order."""
    probes: list[Probe] = []
    if is_macos():
        probes.append(ActiveWindowProbe(timeout_seconds=config.probe_timeout_seconds))
    probes.extend(
        [
            CpuProbe(sample_seconds=config.cpu_sample_seconds),
            MemoryProbe(),
            GpuProbe(timeout_seconds=config.probe_timeout_seconds),
            NetworkProbe(),
        ]
    )
    return probes


def build_monitor_loop(
    config: AppConfig, sink: Sink, interval_seconds: float | None = None
) -> SamplerLoop:
    """Resource monitor: every probe, refreshed on the monitor interval."""
    return SamplerLoop(
        build_monitor_probes(config),
        sink,
        delta_engine=DeltaEngine(DeltaState()),
        interval_seconds=(
            interval_seconds if interval_seconds is not None else config.monitor_interval_seconds
        ),
        probe_timeout_seconds=config.probe_timeout_seconds,
        concurrent_probes=config.concurrent_probes,
    )


def build_window_loop(
    config: AppConfig, sink: Sink, interval_seconds: float | None = None
) -> SamplerLoop:
    """Window-title poller: a single probe on its own (shorter) interval."""
    return SamplerLoop(
        [ActiveWindowProbe(timeout_seconds=config.probe_timeout_seconds)],
        sink,
        interval_seconds=(
            interval_seconds
            if interval_seconds is not None
            else config.window_poll_interval_seconds
        ),
        probe_timeout_seconds=config.probe_timeout_seconds,
    )


async def serve(*runners: Runner, stop_event: asyncio.Event | None = None) -> None:
    """Run loops side by side until one finishes or SIGINT/SIGTERM arrives.

    All runners share one stop event; when any of them returns or raises,
    the others are asked to stop and awaited before returning.
    """
    stop = stop_event if stop_event is not None else asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # No signal handlers on Windows event loops; Ctrl+C still cancels
            log.debug("signal_handler_unavailable", signal=sig.name)

    tasks = [asyncio.create_task(runner(stop)) for runner in runners]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        stop.set()
        await asyncio.gather(*tasks, return_exceptions=True)
        for task in done:
            task.result()
    finally:
        stop.set()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass


@app.command(name="monitor")
def monitor_command(
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between refreshes (default from config)"
    ),
    as_log: bool = typer.Option(False, "--log", help="Emit log lines instead of the live display"),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Stop after N refreshes"),
) -> None:
    """Live system monitor: window, CPU, memory, GPU and network.

    Examples:
        host-sampler monitor
        host-sampler monitor --interval 2 --log
    """
    config = load_config()
    sink: Sink
    if as_log:
        sink = LogSink()
    else:
        sink = ConsoleSink(console=console, bar_width=config.bar_width)
        if not config.debug:
            # Failures already show inline in the frame
            set_console_level("ERROR")

    sampler = build_monitor_loop(config, sink, interval)
    console.print("Starting system monitor...")

    async def run_sampler(stop: asyncio.Event) -> None:
        await sampler.run(stop, max_cycles=count)

    asyncio.run(serve(run_sampler))


@app.command(name="window")
def window_command(
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between polls, 0 for back-to-back"
    ),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Stop after N polls"),
) -> None:
    """Log the frontmost application and window title.

    Examples:
        host-sampler window
        host-sampler window --interval 0.5
    """
    if not is_macos():
        console.print("[red]This command is designed for macOS (darwin)[/red]")
        raise typer.Exit(1)

    sampler = build_window_loop(load_config(), LogSink(event="active_window"), interval)

    async def run_sampler(stop: asyncio.Event) -> None:
        await sampler.run(stop, max_cycles=count)

    asyncio.run(serve(run_sampler))


@app.command(name="watch")
def watch_command(
    path: Optional[Path] = typer.Argument(None, help="Directory to watch (default from config)"),
    recursive: Optional[bool] = typer.Option(
        None,
        "--recursive/--no-recursive",
        help="Watch subdirectories (default from config)",
    ),
) -> None:
    """Log file writes under a directory.

    Examples:
        host-sampler watch ~/projects
        host-sampler watch /var/log --no-recursive
    """
    config = load_config()
    target = path or config.watch_path
    if target is None:
        console.print("[red]Error: no path given and SAMPLER_WATCH_PATH is not set[/red]")
        raise typer.Exit(1)

    watch = WatchLoop(
        target, recursive=recursive if recursive is not None else config.watch_recursive
    )

    async def main() -> None:
        watch.start()
        console.print(f"Watching [cyan]{watch.path}[/cyan] (Ctrl+C to stop)")
        await serve(watch.run)

    try:
        asyncio.run(main())
    except SubscriptionSetupFailed as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


@app.command(name="run")
def run_command(
    watch_path: Optional[Path] = typer.Option(
        None, "--watch", "-w", help="Also watch this directory for writes"
    ),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between samples (default from config)"
    ),
) -> None:
    """Run the sampler (as log lines) and the Watch Loop together.

    Examples:
        host-sampler run --watch ~/projects
    """
    config = load_config()
    sampler = build_monitor_loop(config, LogSink(), interval)
    target = watch_path or config.watch_path
    watch = WatchLoop(target, recursive=config.watch_recursive) if target else None

    async def main() -> None:
        runners: list[Runner] = [sampler.run]
        if watch is not None:
            # Fatal before either loop starts
            watch.start()
            runners.append(watch.run)
        await serve(*runners)

    try:
        asyncio.run(main())
    except SubscriptionSetupFailed as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
