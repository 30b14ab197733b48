"""Observability: structured logging, tracing, metrics and telemetry sinks.

Uses structlog for logging, OpenTelemetry for tracing and Prometheus
for metrics.
"""
