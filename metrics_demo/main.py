"""FastAPI application entrypoint for the instrumented metrics demo."""

from __future__ import annotations

import random

from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from metrics_demo.config import Settings, get_settings
from metrics_demo.demo import DemoMetrics, router as demo_router
from metrics_demo.lib.logger import configure_logging, get_logger
from metrics_demo.registry import MetricRegistry, MetricsError, build_router

logger = get_logger(__name__)


async def metrics_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Surface registry failures as a 500 envelope instead of crashing the request."""

    metric_name = getattr(exc, "metric_name", None)
    logger.error(
        "Metric update failed",
        extra={"metric": metric_name, "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=500)


def create_metrics_app(registry: MetricRegistry, settings: Settings) -> FastAPI:
    """Build a scrape-only application sharing the given registry."""

    metrics_app = FastAPI(title="Metrics Demo exporter", docs_url=None, redoc_url=None, openapi_url=None)
    metrics_app.state.metrics = registry
    metrics_app.include_router(build_router(settings.metrics_path), tags=["system"])
    return metrics_app


def create_app(settings: Settings | None = None, registry: MetricRegistry | None = None) -> FastAPI:
    """Build the demo application around a single metric registry."""

    settings = settings or get_settings()
    configure_logging(settings.log_level, static_fields={"origin": settings.metrics_origin})

    registry = registry or MetricRegistry()
    application = FastAPI(title="Metrics Demo", version="0.1.0")
    application.state.settings = settings
    application.state.metrics = registry
    application.state.demo_metrics = DemoMetrics.register(registry, settings.metrics_origin)
    application.state.rng = random.Random()

    application.add_exception_handler(MetricsError, metrics_error_handler)

    application.include_router(demo_router, tags=["demo"])
    application.include_router(build_router(settings.metrics_path), tags=["system"])

    @application.get("/health", tags=["system"], summary="Health check")
    async def health_check() -> JSONResponse:
        """Return liveness response for uptime monitoring."""
        payload = {"ok": True, "data": {"status": "healthy"}}
        return JSONResponse(content=payload)

    logger.info(
        "Application configured",
        extra={
            "origin": settings.metrics_origin,
            "error_rate": settings.error_rate,
            "metrics_path": settings.metrics_path,
        },
    )
    return application


app = create_app()
