# src/features/proxy_chat/client.py
import time
import httpx
from typing import Any, Dict, Optional

from src.shared.config import logger
from src.shared.errors import ProxyError, INTERNAL_SERVER_ERROR, UPSTREAM_ERROR
from src.shared.metrics import UPSTREAM_REQUESTS, UPSTREAM_LATENCY, TOKENS_SENT, TOKENS_RECEIVED
from src.shared.utils import mask_key


def extract_error_message(data: Any) -> str:
    """Pulls error.message out of a Gemini error body, falling back to a generic message."""
    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, str) and message:
        return message
    return UPSTREAM_ERROR


def record_usage(data: Dict[str, Any]) -> None:
    usage = data.get("usageMetadata")
    if not isinstance(usage, dict):
        return
    prompt_tokens = usage.get("promptTokenCount")
    candidate_tokens = usage.get("candidatesTokenCount")
    if isinstance(prompt_tokens, int) and prompt_tokens > 0:
        TOKENS_SENT.inc(prompt_tokens)
    if isinstance(candidate_tokens, int) and candidate_tokens > 0:
        TOKENS_RECEIVED.inc(candidate_tokens)


class GeminiClient:
    """Sends one generateContent request to the Gemini API. No retries."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str,
        model: str,
    ):
        self._client = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @property
    def url(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def generate_content(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forwards the payload and returns the parsed success body.

        Raises:
            ProxyError: with the upstream status and message when Gemini rejects
                the request, or 500 when the call fails or the body is not JSON.
        """
        logger.info("Forwarding chat to model '%s' with key %s.", self._model, mask_key(self._api_key))
        start_time = time.perf_counter()
        try:
            response = await self._client.post(
                self.url,
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, ValueError) as e:
            UPSTREAM_REQUESTS.labels(outcome="error").inc()
            # The exception type is enough; its text may embed the keyed URL.
            logger.error("Request to Gemini API failed: %s", type(e).__name__)
            raise ProxyError(500, INTERNAL_SERVER_ERROR) from e
        finally:
            UPSTREAM_LATENCY.observe(time.perf_counter() - start_time)

        try:
            data = response.json()
        except ValueError as e:
            UPSTREAM_REQUESTS.labels(outcome="error").inc()
            logger.error(
                "Gemini API returned a non-JSON body (status %s): %s", response.status_code, e
            )
            raise ProxyError(500, INTERNAL_SERVER_ERROR) from e

        UPSTREAM_REQUESTS.labels(outcome=str(response.status_code)).inc()
        if not response.is_success:
            message = extract_error_message(data)
            logger.warning("Gemini API error %s: %s", response.status_code, message)
            raise ProxyError(response.status_code, message)

        if isinstance(data, dict):
            record_usage(data)
        return data
