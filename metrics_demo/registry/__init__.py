"""Metrics registry package providing labeled counters, gauges and exposition."""

from metrics_demo.registry.errors import (
    DuplicateMetricError,
    InvalidLabelError,
    InvalidMetricNameError,
    MetricsError,
    NegativeDeltaError,
)
from metrics_demo.registry.registry import Counter, Gauge, Metric, MetricIdentity, MetricRegistry
from metrics_demo.registry.routes import build_router, get_registry

__all__ = [
    "Counter",
    "DuplicateMetricError",
    "Gauge",
    "InvalidLabelError",
    "InvalidMetricNameError",
    "Metric",
    "MetricIdentity",
    "MetricRegistry",
    "MetricsError",
    "NegativeDeltaError",
    "build_router",
    "get_registry",
]
