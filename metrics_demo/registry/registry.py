"""In-memory metrics registry exposing labeled counters and gauges."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import ClassVar, Iterable, Mapping, TypeVar

from metrics_demo.registry.errors import (
    DuplicateMetricError,
    InvalidLabelError,
    InvalidMetricNameError,
    NegativeDeltaError,
)
from metrics_demo.registry.exposition import escape_help, format_sample

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_KEY_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

LabelValues = tuple[str, ...]
_MetricT = TypeVar("_MetricT", bound="Metric")


@dataclass(frozen=True, slots=True)
class MetricIdentity:
    """Name plus label pairs identifying a single series."""

    name: str
    labels: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, name: str, labels: Mapping[str, object] | None = None) -> "MetricIdentity":
        pairs = sorted((str(key), str(value)) for key, value in (labels or {}).items())
        return cls(name=name, labels=tuple(pairs))

    def label_dict(self) -> dict[str, str]:
        return dict(self.labels)


class Metric:
    """A named family of series sharing one label schema."""

    kind: ClassVar[str] = "untyped"

    def __init__(self, name: str, description: str, label_keys: Iterable[str] = ()) -> None:
        if not _METRIC_NAME_RE.match(name):
            raise InvalidMetricNameError(name, f"Invalid metric name '{name}'")
        keys = tuple(label_keys)
        for key in keys:
            if not _LABEL_KEY_RE.match(key) or key.startswith("__"):
                raise InvalidLabelError(name, f"Metric '{name}' declares invalid label key '{key}'")
        if len(set(keys)) != len(keys):
            raise InvalidLabelError(name, f"Metric '{name}' declares duplicate label keys")

        self.name = name
        self.description = description
        self.label_keys: tuple[str, ...] = keys
        self._lock = threading.Lock()
        # Insertion order of this dict is the first-write order of each series.
        self._series: dict[LabelValues, float] = {}

    def _label_values(self, labels: Mapping[str, object] | None) -> LabelValues:
        provided = labels or {}
        if set(provided) != set(self.label_keys):
            expected = ", ".join(self.label_keys) or "<none>"
            received = ", ".join(sorted(map(str, provided))) or "<none>"
            raise InvalidLabelError(
                self.name,
                f"Metric '{self.name}' expected labels [{expected}] but received [{received}]",
            )
        return tuple(str(provided[key]) for key in self.label_keys)

    def value(self, labels: Mapping[str, object] | None = None) -> float:
        """Return the current value of one series, 0 if it was never written."""

        label_values = self._label_values(labels)
        with self._lock:
            return self._series.get(label_values, 0.0)

    def identities(self) -> list[MetricIdentity]:
        with self._lock:
            observed = list(self._series)
        return [MetricIdentity.of(self.name, dict(zip(self.label_keys, values))) for values in observed]

    def samples(self) -> list[tuple[LabelValues, float]]:
        with self._lock:
            return list(self._series.items())

    def render(self) -> list[str]:
        lines = [
            f"# HELP {self.name} {escape_help(self.description)}",
            f"# TYPE {self.name} {self.kind}",
        ]
        for label_values, value in self.samples():
            lines.append(format_sample(self.name, self.label_keys, label_values, value))
        return lines

    def reset(self) -> None:
        with self._lock:
            self._series.clear()


class Counter(Metric):
    """Monotonically non-decreasing metric."""

    kind = "counter"

    def add(self, labels: Mapping[str, object] | None = None, delta: float = 1) -> None:
        label_values = self._label_values(labels)
        # `not >=` also rejects NaN.
        if not delta >= 0:
            raise NegativeDeltaError(
                self.name, f"Counter '{self.name}' cannot be incremented by {delta!r}"
            )
        with self._lock:
            self._series[label_values] = self._series.get(label_values, 0.0) + float(delta)


class Gauge(Metric):
    """Metric holding the most recently set value."""

    kind = "gauge"

    def set(self, labels: Mapping[str, object] | None, value: float) -> None:
        label_values = self._label_values(labels)
        with self._lock:
            self._series[label_values] = float(value)


class MetricRegistry:
    """Owns every metric of a process and renders them for scraping."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._metrics: dict[str, Metric] = {}

    def create_counter(self, name: str, description: str, label_keys: Iterable[str] = ()) -> Counter:
        return self._register(Counter(name, description, label_keys))

    def create_gauge(self, name: str, description: str, label_keys: Iterable[str] = ()) -> Gauge:
        return self._register(Gauge(name, description, label_keys))

    def _register(self, metric: _MetricT) -> _MetricT:
        with self._lock:
            existing = self._metrics.get(metric.name)
            if existing is None:
                self._metrics[metric.name] = metric
                return metric
        if type(existing) is not type(metric):
            raise DuplicateMetricError(
                metric.name,
                f"Metric '{metric.name}' already registered as a {existing.kind}",
            )
        if existing.label_keys != metric.label_keys:
            raise DuplicateMetricError(
                metric.name,
                f"Metric '{metric.name}' already registered with labels [{', '.join(existing.label_keys)}]",
            )
        return existing  # type: ignore[return-value]

    def get(self, name: str) -> Metric | None:
        with self._lock:
            return self._metrics.get(name)

    def metrics(self) -> list[Metric]:
        with self._lock:
            return list(self._metrics.values())

    def render_snapshot(self) -> str:
        """Render all registered metrics using the Prometheus text format."""

        lines: list[str] = []
        for metric in self.metrics():
            lines.extend(metric.render())
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Drop every series while keeping registrations (testing utility)."""

        for metric in self.metrics():
            metric.reset()
