"""Sink that emits each snapshot as one structured log event."""

from host_sampler.sensors.types import MetricSnapshot
from host_sampler.sinks.base import Sink
from host_sampler.telemetry import SYSTEM_METRICS_SNAPSHOT, get_logger

log = get_logger(__name__)


class LogSink(Sink):
    """Logs a `system_metrics_snapshot` event per cycle.

    Failed probes appear as "N/A" fields plus a `failures` map, so a
    failure is visible in the same line as the metrics that succeeded.
    """

    def __init__(self, event: str = SYSTEM_METRICS_SNAPSHOT, logger=None) -> None:
        self.event = event
        self._log = logger or log

    def emit(self, snapshot: MetricSnapshot) -> None:
        fields = snapshot.to_dict()
        if snapshot.failures:
            self._log.warning(self.event, **fields)
        else:
            self._log.info(self.event, **fields)
