"""Sampling-and-delta-computation core.

- delta.py: DeltaEngine and its DeltaState
- network.py: per-interface rate aggregation
- loop.py: SamplerLoop driving probes into a sink
"""

from host_sampler.sampler.delta import DeltaEngine, DeltaState
from host_sampler.sampler.loop import SamplerLoop, SamplerState
from host_sampler.sampler.network import aggregate_interface_rates

__all__ = [
    "DeltaEngine",
    "DeltaState",
    "SamplerLoop",
    "SamplerState",
    "aggregate_interface_rates",
]
