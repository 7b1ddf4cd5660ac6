"""Scrape route serving the registry snapshot."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from metrics_demo.registry.exposition import CONTENT_TYPE
from metrics_demo.registry.registry import MetricRegistry


def get_registry(request: Request) -> MetricRegistry:
    registry: MetricRegistry | None = getattr(request.app.state, "metrics", None)
    if registry is None:
        raise RuntimeError("Metric registry not configured on application state")
    return registry


async def metrics_endpoint(registry: MetricRegistry = Depends(get_registry)) -> Response:
    """Expose collected metrics for pull-based scraping."""

    return Response(content=registry.render_snapshot(), media_type=CONTENT_TYPE)


def build_router(path: str = "/metrics") -> APIRouter:
    """Return a router serving the snapshot at the configured scrape path."""

    router = APIRouter()
    router.add_api_route(
        path,
        metrics_endpoint,
        methods=["GET"],
        summary="Metrics endpoint",
        response_class=Response,
    )
    return router
