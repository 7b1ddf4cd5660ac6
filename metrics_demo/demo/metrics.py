"""Metric definitions for the instrumented demo endpoint."""

from __future__ import annotations

from dataclasses import dataclass

from metrics_demo.registry import Counter, Gauge, MetricRegistry

ORIGIN_LABEL = "origin"


@dataclass(frozen=True)
class DemoMetrics:
    """Handles for the metrics recorded by the demo endpoint."""

    origin: str
    request_count: Counter
    error_count: Counter
    response_latency: Gauge

    @classmethod
    def register(cls, registry: MetricRegistry, origin: str) -> "DemoMetrics":
        return cls(
            origin=origin,
            request_count=registry.create_counter(
                "request_count",
                "Number of requests served by the demo endpoint.",
                label_keys=(ORIGIN_LABEL,),
            ),
            error_count=registry.create_counter(
                "error_count",
                "Number of demo requests that failed.",
                label_keys=(ORIGIN_LABEL,),
            ),
            response_latency=registry.create_gauge(
                "response_latency",
                "Latency in milliseconds of the most recent demo request.",
                label_keys=(ORIGIN_LABEL,),
            ),
        )

    @property
    def labels(self) -> dict[str, str]:
        return {ORIGIN_LABEL: self.origin}
