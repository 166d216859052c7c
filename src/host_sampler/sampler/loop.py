"""Sampler Loop: drive probes on a fixed period and hand snapshots to a sink.

Each cycle moves through IDLE → SAMPLING → RENDERING → IDLE:

    SAMPLING   every probe is invoked once, in configured order, in a worker
               thread; cumulative Observations go through the Delta Engine
    RENDERING  the complete snapshot is handed to the sink in one call

A failing probe never aborts the cycle: its error is logged with the probe
key and recorded in `snapshot.failures`, and the other probes' readings are
still rendered. The loop runs until its stop event is set, suspending only
while waiting for the next tick.
"""

import asyncio
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum

from host_sampler.sampler.delta import DeltaEngine
from host_sampler.sampler.network import aggregate_interface_rates
from host_sampler.sensors.errors import ProbeError, ProbeExecutionFailed
from host_sampler.sensors.probes import Probe, ProbeReading, ProbeSet
from host_sampler.sensors.types import MetricSnapshot, Observation
from host_sampler.sinks.base import Sink, SinkEmitError
from host_sampler.telemetry import (
    PROBE_FAILED,
    SAMPLER_CYCLE_COMPLETED,
    SAMPLER_CYCLE_FAILED,
    SAMPLER_STARTED,
    SAMPLER_STATE_TRANSITION,
    SAMPLER_STOPPED,
    SENSOR_POLL,
    SINK_EMIT_FAILED,
    get_logger,
)

log = get_logger(__name__)


class SamplerState(str, Enum):
    """Sampler Loop states."""

    IDLE = "idle"
    SAMPLING = "sampling"
    RENDERING = "rendering"


class SamplerLoop:
    """Periodic probe driver.

    Usage:
        >>> loop = SamplerLoop([CpuProbe(), NetworkProbe()], ConsoleSink())
        >>> stop = asyncio.Event()
        >>> await loop.run(stop)  # until stop.set()

    Attributes:
        probes: Probes invoked every cycle, in order.
        sink: Consumer of each cycle's snapshot.
        delta_engine: Rate computation state, owned by this loop.
        interval_seconds: Time between cycles; 0 polls back-to-back.
        probe_timeout_seconds: Upper bound for one probe call, or None.
        concurrent_probes: Run one cycle's probes concurrently.
        cycles: Number of completed cycles.
    """

    def __init__(
        self,
        probes: Iterable[Probe],
        sink: Sink,
        delta_engine: DeltaEngine | None = None,
        interval_seconds: float = 5.0,
        probe_timeout_seconds: float | None = None,
        concurrent_probes: bool = False,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")

        self.probes = probes if isinstance(probes, ProbeSet) else ProbeSet(probes)
        self.sink = sink
        self.delta_engine = delta_engine if delta_engine is not None else DeltaEngine()
        self.interval_seconds = interval_seconds
        self.probe_timeout_seconds = probe_timeout_seconds
        self.concurrent_probes = concurrent_probes
        self.cycles = 0
        self._state = SamplerState.IDLE

    @property
    def state(self) -> SamplerState:
        return self._state

    def _transition(self, new_state: SamplerState) -> None:
        log.debug(SAMPLER_STATE_TRANSITION, from_state=self._state.value, to_state=new_state.value)
        self._state = new_state

    async def _invoke(self, probe: Probe) -> ProbeReading:
        """Run one probe in a worker thread, normalizing every failure.

        Raises:
            ProbeError: On any probe failure, including timeouts.
        """
        call = asyncio.to_thread(probe.sample)
        try:
            if self.probe_timeout_seconds is None:
                return await call
            return await asyncio.wait_for(call, timeout=self.probe_timeout_seconds)
        except ProbeError:
            raise
        except asyncio.TimeoutError as e:
            raise ProbeExecutionFailed(
                probe.key, f"timed out after {self.probe_timeout_seconds}s"
            ) from e
        except Exception as e:
            raise ProbeExecutionFailed(probe.key, f"{type(e).__name__}: {e}") from e

    async def _capture(self, probe: Probe) -> ProbeReading | ProbeError:
        start = time.monotonic()
        try:
            return await self._invoke(probe)
        except ProbeError as e:
            return e
        finally:
            log.debug(
                SENSOR_POLL,
                probe=probe.key,
                duration_ms=round((time.monotonic() - start) * 1000, 1),
            )

    def _record(
        self, snapshot: MetricSnapshot, probe: Probe, outcome: ProbeReading | ProbeError
    ) -> None:
        """Fold one probe outcome into the snapshot."""
        if isinstance(outcome, ProbeError):
            snapshot.failures[probe.key] = outcome
            log.warning(
                PROBE_FAILED,
                probe=probe.key,
                error_kind=outcome.kind.value,
                error=str(outcome),
            )
        elif isinstance(outcome, Observation):
            snapshot.readings[probe.key] = self.delta_engine.update(outcome.key, outcome)
        elif isinstance(outcome, list):
            samples = [self.delta_engine.update(obs.key, obs) for obs in outcome]
            # Members missing this cycle start over as first-seen when they return
            self.delta_engine.retain(f"{probe.key}/", (obs.key for obs in outcome))
            snapshot.readings[probe.key] = aggregate_interface_rates(samples)
        else:
            snapshot.readings[probe.key] = outcome

    async def run_cycle(self) -> MetricSnapshot:
        """Sample every probe once and emit the snapshot.

        Returns:
            The snapshot handed to the sink.

        Raises:
            SinkEmitError: The sink raised; the original error is chained.
            Exception: Any failure while folding readings into the snapshot.
                Probe errors never escape.
        """
        snapshot = MetricSnapshot(taken_at=datetime.now(timezone.utc), order=self.probes.keys)

        self._transition(SamplerState.SAMPLING)
        try:
            if self.concurrent_probes:
                # Render only after every probe has settled
                outcomes = await asyncio.gather(*(self._capture(p) for p in self.probes))
            else:
                outcomes = [await self._capture(p) for p in self.probes]

            # Delta updates in probe order regardless of completion order
            for probe, outcome in zip(self.probes, outcomes):
                self._record(snapshot, probe, outcome)

            self._transition(SamplerState.RENDERING)
            try:
                self.sink.emit(snapshot)
            except Exception as e:
                raise SinkEmitError(type(self.sink).__name__, e) from e
        finally:
            self._transition(SamplerState.IDLE)

        self.cycles += 1
        log.debug(
            SAMPLER_CYCLE_COMPLETED,
            cycle=self.cycles,
            readings=len(snapshot.readings),
            failures=sorted(snapshot.failures),
        )
        return snapshot

    async def _wait_for_tick(self, stop_event: asyncio.Event) -> bool:
        """Sleep until the next tick.

        Returns:
            True if the stop event was set while waiting.
        """
        if self.interval_seconds <= 0:
            await asyncio.sleep(0)
            return stop_event.is_set()
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            return True
        except asyncio.TimeoutError:
            return False

    async def run(
        self, stop_event: asyncio.Event | None = None, max_cycles: int | None = None
    ) -> None:
        """Cycle until the stop event is set (or max_cycles complete).

        Args:
            stop_event: Shared cancellation signal, observed at every tick.
            max_cycles: Stop after this many cycles, failed ones included.
        """
        stop_event = stop_event if stop_event is not None else asyncio.Event()

        log.info(
            SAMPLER_STARTED,
            probes=self.probes.keys,
            interval_seconds=self.interval_seconds,
            concurrent_probes=self.concurrent_probes,
        )
        attempts = 0
        try:
            while not stop_event.is_set():
                attempts += 1
                try:
                    await self.run_cycle()
                except asyncio.CancelledError:
                    raise
                except SinkEmitError as e:
                    log.error(
                        SINK_EMIT_FAILED,
                        sink=e.sink,
                        error=str(e.__cause__),
                        error_type=type(e.__cause__).__name__,
                        exc_info=True,
                    )
                except Exception as e:
                    log.error(
                        SAMPLER_CYCLE_FAILED,
                        cycle=attempts,
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=True,
                    )

                if max_cycles is not None and attempts >= max_cycles:
                    break
                if await self._wait_for_tick(stop_event):
                    break
        finally:
            log.info(SAMPLER_STOPPED, cycles=self.cycles)
