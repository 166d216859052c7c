"""Snapshot consumers.

- base.py: Sink contract
- console.py: clear-and-redraw rich display
- log_sink.py: one structured log event per snapshot
- formatting.py: byte, rate and bar formatting
"""

from host_sampler.sinks.base import Sink, SinkEmitError
from host_sampler.sinks.console import ConsoleSink
from host_sampler.sinks.formatting import format_bytes, format_rate, render_bar
from host_sampler.sinks.log_sink import LogSink

__all__ = [
    "Sink",
    "SinkEmitError",
    "ConsoleSink",
    "LogSink",
    "format_bytes",
    "format_rate",
    "render_bar",
]
