"""Instrumented demo routes."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from metrics_demo.config import Settings
from metrics_demo.demo.metrics import DemoMetrics
from metrics_demo.demo.service import handle_request

router = APIRouter()


def get_demo_metrics(request: Request) -> DemoMetrics:
    metrics: DemoMetrics | None = getattr(request.app.state, "demo_metrics", None)
    if metrics is None:
        raise RuntimeError("Demo metrics not configured on application state")
    return metrics


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng  # type: ignore[no-any-return]


@router.get("/", summary="Instrumented demo endpoint")
async def demo_endpoint(
    metrics: DemoMetrics = Depends(get_demo_metrics),
    settings: Settings = Depends(get_app_settings),
    rng: random.Random = Depends(get_rng),
) -> JSONResponse:
    outcome = await handle_request(metrics, settings, rng)
    status_code = 500 if outcome.failed else 200
    return JSONResponse(outcome.json_payload(), status_code=status_code)
