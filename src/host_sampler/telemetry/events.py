"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying of the JSONL log.
"""

# Sampler Loop events
SAMPLER_STARTED = "sampler_started"
SAMPLER_STOPPED = "sampler_stopped"
SAMPLER_CYCLE_COMPLETED = "sampler_cycle_completed"
SAMPLER_STATE_TRANSITION = "sampler_state_transition"
SAMPLER_CYCLE_FAILED = "sampler_cycle_failed"
SINK_EMIT_FAILED = "sink_emit_failed"

# Probe events
SENSOR_POLL = "sensor_poll"
PROBE_FAILED = "probe_failed"
SYSTEM_METRICS_SNAPSHOT = "system_metrics_snapshot"

# Delta Engine events
COUNTER_BASELINED = "counter_baselined"
COUNTER_BASELINES_DROPPED = "counter_baselines_dropped"
COUNTER_RESET_DETECTED = "counter_reset_detected"
CLOCK_ANOMALY_DETECTED = "clock_anomaly_detected"

# Watch Loop events
WATCH_STARTED = "watch_started"
WATCH_STOPPED = "watch_stopped"
WATCH_SETUP_FAILED = "watch_setup_failed"
WATCH_RUNTIME_ERROR = "watch_runtime_error"
FILE_WRITTEN = "file_written"
FILE_CHANGED = "file_changed"
