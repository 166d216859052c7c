"""Sink contract: consumers of one Sampler Loop snapshot."""

from abc import ABC, abstractmethod

from host_sampler.sensors.types import MetricSnapshot


class Sink(ABC):
    """Consumes a metric snapshot. Owns no timing logic."""

    @abstractmethod
    def emit(self, snapshot: MetricSnapshot) -> None:
        """Render or record one snapshot."""


class SinkEmitError(Exception):
    """A sink failed to consume a snapshot.

    Attributes:
        sink: Class name of the failing sink.
    """

    def __init__(self, sink: str, error: Exception) -> None:
        super().__init__(f"{sink} failed: {error}")
        self.sink = sink
