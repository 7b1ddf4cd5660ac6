"""Simulated request handling recorded into the demo metrics."""

from __future__ import annotations

import asyncio
import random

from metrics_demo.config import Settings
from metrics_demo.demo.metrics import DemoMetrics
from metrics_demo.demo.schemas import RequestOutcome
from metrics_demo.lib.logger import get_logger

logger = get_logger(__name__)


async def handle_request(metrics: DemoMetrics, settings: Settings, rng: random.Random) -> RequestOutcome:
    """Simulate work, record it, and fail at the configured error rate."""

    latency_ms = rng.randint(settings.latency_min_ms, settings.latency_max_ms)
    if latency_ms:
        await asyncio.sleep(latency_ms / 1000)

    failed = rng.random() < settings.error_rate

    labels = metrics.labels
    metrics.request_count.add(labels, 1)
    metrics.response_latency.set(labels, latency_ms)
    if failed:
        metrics.error_count.add(labels, 1)
        logger.warning(
            "Simulated request failure",
            extra={"origin": metrics.origin, "latency_ms": latency_ms},
        )

    return RequestOutcome(latency_ms=latency_ms, failed=failed)
