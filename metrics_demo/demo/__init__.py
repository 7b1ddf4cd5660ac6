"""Demo package: one endpoint instrumented with request, error and latency metrics."""

from metrics_demo.demo.metrics import DemoMetrics
from metrics_demo.demo.routes import router
from metrics_demo.demo.service import handle_request

__all__ = ["DemoMetrics", "handle_request", "router"]
