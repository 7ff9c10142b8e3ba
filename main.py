#!/usr/bin/env python3
"""
Gemini Chat Proxy
Forwards chat requests to the Gemini API, keeping the API key on the server.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
import uvicorn

from fastapi import FastAPI

from src.shared.config import config, logger
from src.shared.errors import register_error_handlers
from src.shared.middleware import RequestTracingMiddleware
from src.features.proxy_chat.endpoints import router as proxy_chat_router
from src.features.health_check.endpoints import router as health_check_router
from src.features.metrics.endpoints import router as metrics_router


def build_http_client(config_: Dict[str, Any]) -> httpx.AsyncClient:
    """Creates the shared outbound client, routed through requestProxy when enabled."""
    client_kwargs: Dict[str, Any] = {"timeout": config_["gemini"]["timeout"]}
    if config_["requestProxy"]["enabled"] and config_["requestProxy"]["url"]:
        client_kwargs["proxy"] = config_["requestProxy"]["url"]
        logger.info("Using proxy for httpx client: %s", config_["requestProxy"]["url"])
    return httpx.AsyncClient(**client_kwargs)


def create_app(
    config_: Optional[Dict[str, Any]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Builds the application around an explicit configuration."""
    config_ = config if config_ is None else config_

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        owns_client = getattr(app_.state, "http_client", None) is None
        if owns_client:
            app_.state.http_client = build_http_client(config_)
        if not config_["gemini"].get("api_key"):
            logger.warning("GEMINI_API_KEY is not set; chat requests will be answered with 500.")
        logger.info("Application startup complete")
        yield
        if owns_client:
            await app_.state.http_client.aclose()
            app_.state.http_client = None
        logger.info("Application shutdown complete")

    app_ = FastAPI(
        title="Gemini Chat Proxy",
        description="Forwards chat requests to the Gemini API without exposing the API key",
        version="1.0.0",
        lifespan=lifespan,
    )
    app_.state.config = config_
    app_.state.http_client = http_client

    app_.include_router(proxy_chat_router, prefix="/api", tags=["Proxy"])
    app_.include_router(health_check_router, tags=["Monitoring"])
    app_.include_router(metrics_router)

    register_error_handlers(app_)
    app_.add_middleware(RequestTracingMiddleware)
    return app_


app = create_app()

if __name__ == "__main__":
    host = config["server"]["host"]
    port = config["server"]["port"]

    logger.warning("Starting Gemini Chat Proxy on %s:%s", host, port)
    logger.warning("Chat URL: http://%s:%s/api/chat", host, port)
    logger.warning("Metrics: http://%s:%s/metrics", host, port)

    log_config = uvicorn.config.LOGGING_CONFIG
    http_log_level = config["server"].get("http_log_level", "INFO").upper()
    log_config["loggers"]["uvicorn.access"]["level"] = http_log_level

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=log_config,
        timeout_graceful_shutdown=30,
        server_header=False
    )
