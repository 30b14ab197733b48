"""Prometheus metrics for probebot.

Counts turns per command, turn latency, turn failures, store writes
and simulated delays.
"""

from prometheus_client import Counter, Histogram

TURNS_PROCESSED = Counter(
    "probebot_turns_total",
    "Total number of turns dispatched",
    labelnames=["command"],
)

TURN_LATENCY = Histogram(
    "probebot_turn_latency_seconds",
    "Turn processing latency in seconds",
    labelnames=["command"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

TURN_ERRORS = Counter(
    "probebot_turn_errors_total",
    "Total number of failures that escaped turn processing",
    labelnames=["error_type"],
)

MESSAGES_STORED = Counter(
    "probebot_messages_stored_total",
    "Total number of messages appended to the message store",
    labelnames=["backend"],
)

SIMULATED_DELAY = Histogram(
    "probebot_simulated_delay_seconds",
    "Delay chosen by the latency simulation command",
    buckets=(0.1, 0.5, 1.0, 2.0, 3.0, 4.0, 5.0),
)

TELEMETRY_FAILURES = Counter(
    "probebot_telemetry_failures_total",
    "Telemetry emissions that failed and were dropped",
    labelnames=["operation"],
)
