"""Aggregation of per-interface network rates.

Each interface's counters go through the Delta Engine on their own; only
interfaces that moved any bytes during the interval count towards the
upload/download totals.
"""

from collections.abc import Iterable

from host_sampler.sensors.types import NetworkRates, RateSample

SENT_FIELD = "bytes_sent"
RECV_FIELD = "bytes_recv"


def aggregate_interface_rates(samples: Iterable[RateSample | None]) -> NetworkRates | None:
    """Sum upload/download rates across active interfaces.

    Args:
        samples: Delta Engine results for each interface this cycle. None
            entries (interface first seen, counter reset, clock anomaly)
            contribute nothing.

    Returns:
        NetworkRates, or None when no interface produced a rate at all
        (first cycle, nothing to compare against yet).
    """
    upload = 0.0
    download = 0.0
    active: list[str] = []
    any_rate = False

    for sample in samples:
        if sample is None:
            continue
        any_rate = True
        # Only show active interfaces
        if sample.delta <= 0:
            continue
        upload += sample.component_rates.get(SENT_FIELD, 0.0)
        download += sample.component_rates.get(RECV_FIELD, 0.0)
        active.append(sample.key.rsplit("/", 1)[-1])

    if not any_rate:
        return None

    return NetworkRates(
        upload_per_second=upload,
        download_per_second=download,
        active_interfaces=tuple(active),
    )
