"""Vetting API server: uvicorn on the current asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


async def run_api_server() -> None:
    """Serve the FastAPI app until cancelled.

    ``uvicorn.Server.serve()`` is fully async, so this can be awaited from
    ``src.main`` or scheduled as a task next to other work.
    """
    from src.api.app import create_app

    app = create_app()
    config = uvicorn.Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="warning",
        loop="none",  # use the existing event loop
    )
    server = uvicorn.Server(config)
    logger.info(f"Vetting API starting on http://{settings.api_host}:{settings.api_port}")
    await server.serve()
