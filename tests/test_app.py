"""HTTP tests for the instrumented demo endpoint and the scrape route."""

from __future__ import annotations

import asyncio
import random

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from metrics_demo import serve as serve_module
from metrics_demo.config import Settings
from metrics_demo.demo import DemoMetrics, handle_request
from metrics_demo.main import create_app, create_metrics_app
from metrics_demo.registry import MetricRegistry
from metrics_demo.serve import build_servers, run_servers


@pytest.mark.asyncio
async def test_health_endpoint(async_client: AsyncClient) -> None:
    """Health route should return healthy status envelope."""
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "data": {"status": "healthy"}}


@pytest.mark.asyncio
async def test_demo_endpoint_records_requests(async_client: AsyncClient) -> None:
    """Each call to the demo endpoint should bump request_count and set latency."""
    for _ in range(3):
        response = await async_client.get("/")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "data": {"message": "Hello World!"}}

    scrape = await async_client.get("/metrics")

    assert scrape.status_code == 200
    assert scrape.headers["content-type"].startswith("text/plain; version=0.0.4")
    lines = scrape.text.splitlines()
    assert 'request_count{origin="test-origin"} 3' in lines
    assert 'response_latency{origin="test-origin"} 0' in lines
    assert "# TYPE error_count counter" in lines
    assert not any(line.startswith("error_count{") for line in lines)


@pytest.mark.asyncio
async def test_scrape_lists_metrics_in_registration_order(async_client: AsyncClient) -> None:
    await async_client.get("/")
    scrape = await async_client.get("/metrics")

    type_lines = [line for line in scrape.text.splitlines() if line.startswith("# TYPE")]
    assert type_lines == [
        "# TYPE request_count counter",
        "# TYPE error_count counter",
        "# TYPE response_latency gauge",
    ]


@pytest.mark.asyncio
async def test_demo_endpoint_failure_counts_errors(failing_client: AsyncClient) -> None:
    """Simulated failures should surface as 500s and increment error_count."""
    response = await failing_client.get("/")

    assert response.status_code == 500
    assert response.json() == {"ok": False, "error": "simulated failure"}

    scrape = await failing_client.get("/metrics")
    lines = scrape.text.splitlines()
    assert 'request_count{origin="failing"} 1' in lines
    assert 'error_count{origin="failing"} 1' in lines


@pytest.mark.asyncio
async def test_registry_errors_become_error_envelope(app: FastAPI) -> None:
    """A registry error raised by a handler must not crash the process."""

    application = create_app(app.state.settings, MetricRegistry())
    counter = application.state.metrics.create_counter("broken_total", "Always misused.", label_keys=("origin",))

    @application.get("/broken")
    async def broken() -> dict[str, bool]:
        counter.add({"unexpected": "label"}, 1)
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://testserver") as client:
        response = await client.get("/broken")
        health = await client.get("/health")

    assert response.status_code == 500
    body = response.json()
    assert body["ok"] is False
    assert "broken_total" in body["error"]
    assert health.status_code == 200


@pytest.mark.asyncio
async def test_custom_metrics_path(app: FastAPI) -> None:
    settings = app.state.settings.model_copy(update={"metrics_path": "/internal/scrape"})
    application = create_app(settings, MetricRegistry())

    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://testserver") as client:
        await client.get("/")
        moved = await client.get("/internal/scrape")
        default = await client.get("/metrics")

    assert moved.status_code == 200
    assert "request_count{" in moved.text
    assert default.status_code == 404


@pytest.mark.asyncio
async def test_dedicated_metrics_app_shares_registry(app: FastAPI) -> None:
    registry = MetricRegistry()
    application = create_app(app.state.settings, registry)
    exporter = create_metrics_app(registry, app.state.settings)

    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://testserver") as client:
        await client.get("/")
    async with AsyncClient(transport=ASGITransport(app=exporter), base_url="http://testserver") as client:
        scrape = await client.get("/metrics")
        root = await client.get("/")

    assert 'request_count{origin="test-origin"} 1' in scrape.text.splitlines()
    assert root.status_code == 404


@pytest.mark.asyncio
async def test_handle_request_uses_latency_bounds() -> None:
    registry = MetricRegistry()
    metrics = DemoMetrics.register(registry, "bounded")
    settings = Settings(latency_min_ms=1, latency_max_ms=3, error_rate=0.0)

    outcome = await handle_request(metrics, settings, random.Random(7))

    assert 1 <= outcome.latency_ms <= 3
    assert outcome.failed is False
    assert metrics.response_latency.value(metrics.labels) == outcome.latency_ms
    assert metrics.request_count.value(metrics.labels) == 1
    assert metrics.error_count.value(metrics.labels) == 0


def test_demo_metrics_registration_is_idempotent() -> None:
    registry = MetricRegistry()

    first = DemoMetrics.register(registry, "a")
    second = DemoMetrics.register(registry, "b")

    assert first.request_count is second.request_count
    assert [metric.name for metric in registry.metrics()] == [
        "request_count",
        "error_count",
        "response_latency",
    ]


def test_build_servers_shares_port_when_not_dedicated(app: FastAPI) -> None:
    settings = app.state.settings.model_copy(update={"app_port": 8080, "metrics_port": 8080})

    servers = build_servers(settings)

    assert [server.config.port for server in servers] == [8080]


def test_build_servers_adds_metrics_listener_with_shared_registry(app: FastAPI) -> None:
    settings = app.state.settings.model_copy(update={"app_port": 18080, "metrics_port": 18081})

    servers = build_servers(settings)

    assert [server.config.port for server in servers] == [18080, 18081]
    application, exporter = (server.config.app for server in servers)
    assert exporter.state.metrics is application.state.metrics


class _StubServer:
    """Stands in for a uvicorn server: serves until `should_exit` is set."""

    def __init__(self, stop_after: int | None = None, error: Exception | None = None) -> None:
        self.should_exit = False
        self.stop_after = stop_after
        self.error = error
        self.stopped = False

    async def serve(self) -> None:
        ticks = 0
        while not self.should_exit:
            if self.stop_after is not None and ticks >= self.stop_after:
                break
            ticks += 1
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        self.stopped = True


@pytest.mark.asyncio
async def test_run_servers_stops_every_listener_when_one_exits() -> None:
    signalled = _StubServer(stop_after=3)
    sibling = _StubServer()

    await asyncio.wait_for(run_servers([signalled, sibling]), timeout=2.0)  # type: ignore[list-item]

    assert signalled.stopped and sibling.stopped
    assert sibling.should_exit is True


@pytest.mark.asyncio
async def test_run_servers_propagates_listener_failure() -> None:
    broken = _StubServer(stop_after=1, error=OSError("address in use"))
    sibling = _StubServer()

    with pytest.raises(OSError, match="address in use"):
        await asyncio.wait_for(run_servers([broken, sibling]), timeout=2.0)  # type: ignore[list-item]

    assert sibling.stopped


def test_main_swallows_keyboard_interrupt(monkeypatch: pytest.MonkeyPatch) -> None:
    async def interrupted(settings: Settings) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(serve_module, "serve", interrupted)

    serve_module.main()
