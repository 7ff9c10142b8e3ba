from typing import Any, Dict

import httpx
from fastapi import Depends
from src.shared.dependencies import get_http_client, get_app_config
from src.shared.config import logger
from .query import HealthCheckResponse

class HealthCheckHandler:
    def __init__(
        self,
        http_client: httpx.AsyncClient = Depends(get_http_client),
        config: Dict[str, Any] = Depends(get_app_config),
    ):
        self._http_client = http_client
        self._gemini = config["gemini"]

    async def handle(self) -> HealthCheckResponse:
        services_status = {
            "api_key": "configured" if self._gemini.get("api_key") else "missing"
        }

        # The probe carries no key; any answer below 500 means Gemini is reachable.
        try:
            health_resp = await self._http_client.head(self._gemini["base_url"], timeout=5.0)
            services_status["gemini_api"] = "up" if health_resp.status_code < 500 else "down"
        except httpx.HTTPError as e:
            logger.error("Gemini API health check failed: %s", type(e).__name__)
            services_status["gemini_api"] = "down"

        healthy = all(s in ("up", "configured") for s in services_status.values())
        return HealthCheckResponse(status="ok" if healthy else "error", services=services_status)
