"""Pytest fixtures for the metrics demo tests."""

from collections.abc import AsyncIterator, Iterator
import os

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("METRICS_ORIGIN", "test-origin")
os.environ.setdefault("ERROR_RATE", "0")
os.environ.setdefault("LATENCY_MIN_MS", "0")
os.environ.setdefault("LATENCY_MAX_MS", "0")

from metrics_demo.config import Settings
from metrics_demo.main import app as fastapi_app
from metrics_demo.main import create_app
from metrics_demo.registry import MetricRegistry


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Return the FastAPI application instance."""
    return fastapi_app


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` configured for the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture(autouse=True)
def reset_runtime(app: FastAPI) -> Iterator[None]:
    """Reset metric series across tests."""

    metrics = getattr(app.state, "metrics", None)
    if metrics is not None:
        metrics.reset()
    yield
    if metrics is not None:
        metrics.reset()


@pytest.fixture()
def registry() -> MetricRegistry:
    """Return an isolated registry independent of the application one."""

    return MetricRegistry()


@pytest.fixture()
def failing_app() -> FastAPI:
    """Application whose demo endpoint always fails."""

    settings = Settings(error_rate=1.0, latency_min_ms=0, latency_max_ms=0, metrics_origin="failing")
    return create_app(settings)


@pytest_asyncio.fixture()
async def failing_client(failing_app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=failing_app), base_url="http://testserver") as client:
        yield client
