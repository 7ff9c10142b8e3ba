#!/usr/bin/env python3
"""
Dependency provider functions for the application.
"""

from typing import Any, Dict

from fastapi import Depends, Request
import httpx

from src.features.proxy_chat.client import GeminiClient

def get_http_client(request: Request) -> httpx.AsyncClient:
    """Returns the shared httpx.AsyncClient instance."""
    return request.app.state.http_client

def get_app_config(request: Request) -> Dict[str, Any]:
    """Returns the configuration the app was created with."""
    return request.app.state.config

def get_gemini_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    config: Dict[str, Any] = Depends(get_app_config),
) -> GeminiClient:
    """Builds a GeminiClient bound to the configured key, endpoint and model."""
    gemini = config["gemini"]
    return GeminiClient(
        http_client,
        api_key=gemini.get("api_key"),
        base_url=gemini["base_url"],
        model=gemini["model"],
    )
