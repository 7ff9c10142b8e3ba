"""
Error type and FastAPI exception handlers for the Gemini chat proxy.
Every failure leaves the service as a JSON body of the form {"error": <message>}.
"""

from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.shared.config import logger
from src.shared.metrics import REJECTED_REQUESTS

METHOD_NOT_ALLOWED = "Method not allowed"
API_KEY_NOT_CONFIGURED = "API key not configured"
INTERNAL_SERVER_ERROR = "Internal server error"
UPSTREAM_ERROR = "Gemini API error"


class ProxyError(Exception):
    """A failure that is answered with its own status code and message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_response(self) -> Dict[str, str]:
        return {"error": self.message}


def register_error_handlers(app: FastAPI) -> None:
    """Register the proxy, routing and catch-all error handlers on the app."""

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        logger.info("Responding with error %s: %s", exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Methods no route lists are refused by the router before any handler runs.
        if exc.status_code == 405:
            REJECTED_REQUESTS.labels(reason="method_not_allowed").inc()
            message = METHOD_NOT_ALLOWED
        else:
            message = str(exc.detail)
        logger.info("Responding with error %s: %s", exc.status_code, message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Never leak internal details to the caller.
        logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(status_code=500, content={"error": INTERNAL_SERVER_ERROR})
