"""Delta Engine: per-second rates from cumulative counters.

Probes such as network interface counters only expose totals since some
starting point. The engine keeps the last Observation per key in an
explicitly owned DeltaState and turns each new Observation into a rate:

    rate = (value - prev.value) / (timestamp - prev.timestamp)

Policies:
- First observation for a key: stored, no rate (insufficient history)
- Δt <= 0 (duplicate poll, clock anomaly): no rate, previous kept
- Δvalue < 0 or counter fields changed (counter reset): no rate, re-baseline
"""

import threading
from collections.abc import Iterable, Iterator, Mapping

from host_sampler.sensors.types import CounterValue, Observation, RateSample
from host_sampler.telemetry import (
    CLOCK_ANOMALY_DETECTED,
    COUNTER_BASELINED,
    COUNTER_BASELINES_DROPPED,
    COUNTER_RESET_DETECTED,
    get_logger,
)

log = get_logger(__name__)


class DeltaState:
    """Mapping from key to the most recent Observation seen for it.

    Owned by one Sampler Loop and injected into its DeltaEngine, so tests
    can build isolated engines without process-wide state.
    """

    def __init__(self) -> None:
        self._observations: dict[str, Observation] = {}

    def get(self, key: str) -> Observation | None:
        return self._observations.get(key)

    def set(self, key: str, observation: Observation) -> None:
        self._observations[key] = observation

    def discard(self, key: str) -> None:
        self._observations.pop(key, None)

    def clear(self) -> None:
        self._observations.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._observations

    def __len__(self) -> int:
        return len(self._observations)

    def __iter__(self) -> Iterator[str]:
        return iter(self._observations)


def _counter_deltas(previous: CounterValue, current: CounterValue) -> dict[str, int] | None:
    """Component-wise difference between two counter values.

    Returns:
        Field name -> delta (a scalar counter uses the single field ""),
        or None when the two values do not have the same shape.
    """
    if isinstance(previous, Mapping) and isinstance(current, Mapping):
        if set(previous) != set(current):
            return None
        return {name: current[name] - previous[name] for name in current}
    if isinstance(previous, Mapping) or isinstance(current, Mapping):
        return None
    return {"": current - previous}


class DeltaEngine:
    """Converts consecutive cumulative Observations into RateSamples.

    `update` holds a lock for the read-compare-write of one key, so probes
    may run concurrently within a cycle without corrupting the state.

    Usage:
        >>> engine = DeltaEngine()
        >>> engine.update("rx", Observation("rx", 0.0, 1000))
        >>> engine.update("rx", Observation("rx", 5.0, 6000)).value_per_second
        1000.0
    """

    def __init__(self, state: DeltaState | None = None) -> None:
        self.state = state if state is not None else DeltaState()
        self._lock = threading.Lock()

    def update(self, key: str, observation: Observation) -> RateSample | None:
        """Record an observation and return the rate since the previous one.

        Args:
            key: Delta-state key (usually observation.key).
            observation: New cumulative reading.

        Returns:
            RateSample, or None when no rate can be computed yet.
        """
        with self._lock:
            previous = self.state.get(key)
            if previous is None:
                self.state.set(key, observation)
                log.debug(COUNTER_BASELINED, key=key)
                return None

            interval = observation.timestamp - previous.timestamp
            if interval <= 0:
                log.debug(CLOCK_ANOMALY_DETECTED, key=key, interval_seconds=interval)
                return None

            deltas = _counter_deltas(previous.value, observation.value)
            if deltas is None or any(d < 0 for d in deltas.values()):
                self.state.set(key, observation)
                log.info(
                    COUNTER_RESET_DETECTED,
                    key=key,
                    reason="shape_changed" if deltas is None else "counter_decreased",
                )
                return None

            self.state.set(key, observation)

        total = sum(deltas.values())
        component_rates = (
            {name: delta / interval for name, delta in deltas.items()}
            if isinstance(observation.value, Mapping)
            else {}
        )
        return RateSample(
            key=key,
            value_per_second=total / interval,
            interval_seconds=interval,
            delta=total,
            component_rates=component_rates,
        )

    def retain(self, prefix: str, keys: Iterable[str]) -> list[str]:
        """Forget keys under `prefix` that are not in `keys`.

        Used for counter groups whose members come and go (network
        interfaces): a member missing from one cycle starts over as
        first-seen when it returns.

        Returns:
            The keys that were dropped.
        """
        keep = set(keys)
        with self._lock:
            stale = [k for k in self.state if k.startswith(prefix) and k not in keep]
            for key in stale:
                self.state.discard(key)
        if stale:
            log.debug(COUNTER_BASELINES_DROPPED, keys=stale)
        return stale

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when `key` is None."""
        with self._lock:
            if key is None:
                self.state.clear()
            else:
                self.state.discard(key)
