"""Run the demo application and, when configured, a dedicated metrics listener."""

from __future__ import annotations

import asyncio
from typing import Sequence

import uvicorn

from metrics_demo.config import Settings, get_settings
from metrics_demo.lib.logger import get_logger
from metrics_demo.main import create_app, create_metrics_app

logger = get_logger(__name__)


def build_servers(settings: Settings) -> list[uvicorn.Server]:
    application = create_app(settings)
    configs = [
        uvicorn.Config(application, host=settings.app_host, port=settings.app_port, log_config=None),
    ]
    if settings.dedicated_metrics_listener:
        metrics_app = create_metrics_app(application.state.metrics, settings)
        configs.append(
            uvicorn.Config(metrics_app, host=settings.app_host, port=settings.metrics_port, log_config=None)
        )
    return [uvicorn.Server(config) for config in configs]


async def run_servers(servers: Sequence[uvicorn.Server]) -> None:
    """Serve until any listener stops, then shut the remaining ones down."""

    tasks = [asyncio.create_task(server.serve()) for server in servers]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        # A signal may reach only one listener; the others must follow it.
        for server in servers:
            server.should_exit = True
        await asyncio.gather(*tasks, return_exceptions=True)
    for task in tasks:
        if task.cancelled():
            continue
        exc = task.exception()
        if exc is not None:
            raise exc


async def serve(settings: Settings) -> None:
    servers = build_servers(settings)
    logger.info(
        "Starting listeners",
        extra={"ports": [server.config.port for server in servers]},
    )
    await run_servers(servers)
    logger.info("Listeners stopped")


def main() -> None:
    try:
        asyncio.run(serve(get_settings()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
