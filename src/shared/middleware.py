import time
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from src.shared.config import logger, request_id_var

class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Ties every log line of a request to one X-Request-ID, reusing the caller's
    id when given, and reports how long the proxy took to answer.
    """
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            start_time = time.perf_counter()
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
            # Path only: the query string is never logged.
            logger.info(
                "%s %s -> %s in %.4fs",
                request.method, request.url.path, response.status_code, process_time,
            )
            return response
        finally:
            request_id_var.reset(token)
