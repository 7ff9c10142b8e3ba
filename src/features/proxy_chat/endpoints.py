from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from .handler import ProxyChatHandler

router = APIRouter()

# Every method is routed here so the handler answers non-POST calls itself.
@router.api_route(
    "/chat",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    response_model=None,
)
async def proxy_chat(
    request: Request,
    handler: ProxyChatHandler = Depends(ProxyChatHandler)
) -> JSONResponse:
    return await handler.handle(request)
