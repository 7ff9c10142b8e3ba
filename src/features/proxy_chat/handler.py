# src/features/proxy_chat/handler.py
import json

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from src.shared.config import logger
from src.shared.dependencies import get_gemini_client
from src.shared.errors import (
    ProxyError, METHOD_NOT_ALLOWED, API_KEY_NOT_CONFIGURED, INTERNAL_SERVER_ERROR,
)
from src.shared.metrics import REJECTED_REQUESTS

from .command import ProxyChatRequest
from .client import GeminiClient

class ProxyChatHandler:
    def __init__(self, gemini_client: GeminiClient = Depends(get_gemini_client)):
        self._client = gemini_client

    async def handle(self, request: Request) -> JSONResponse:
        # The method check comes first, so a misconfigured server still answers 405.
        if request.method != "POST":
            REJECTED_REQUESTS.labels(reason="method_not_allowed").inc()
            raise ProxyError(405, METHOD_NOT_ALLOWED)

        if not self._client.configured:
            REJECTED_REQUESTS.labels(reason="api_key_missing").inc()
            logger.error("GEMINI_API_KEY is not configured; refusing to forward chat.")
            raise ProxyError(500, API_KEY_NOT_CONFIGURED)

        try:
            chat_request = ProxyChatRequest.from_body(json.loads(await request.body()))
        except ValueError as e:
            logger.error("Could not read chat request body: %s", e)
            raise ProxyError(500, INTERNAL_SERVER_ERROR) from e

        completion = await self._client.generate_content(chat_request.to_generate_content())
        return JSONResponse(status_code=200, content=completion)
