"""Local host telemetry sampler."""
