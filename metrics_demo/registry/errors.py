"""Errors raised by the metrics registry."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for metric registration and update failures."""

    def __init__(self, metric_name: str, message: str) -> None:
        super().__init__(message)
        self.metric_name = metric_name


class DuplicateMetricError(MetricsError):
    """A metric name was reused with a different kind or label schema."""


class InvalidLabelError(MetricsError, ValueError):
    """Label keys do not match the schema declared for the metric."""


class NegativeDeltaError(MetricsError, ValueError):
    """A counter was asked to move backwards."""


class InvalidMetricNameError(MetricsError, ValueError):
    """The metric name is not valid in the exposition format."""
