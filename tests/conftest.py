"""Shared fixtures: an app wired to a fake Gemini upstream."""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from src.shared.config import GeminiConfig, RequestProxyConfig, ServerConfig

TEST_API_KEY = "test-gemini-key-0123456789"


def make_config(api_key: Optional[str] = TEST_API_KEY, **gemini: Any) -> Dict[str, Any]:
    return {
        "server": ServerConfig().model_dump(),
        "gemini": GeminiConfig(api_key=api_key, **gemini).model_dump(),
        "requestProxy": RequestProxyConfig().model_dump(),
    }


class FakeGemini:
    """Records every outbound request and answers with `respond`."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"candidates": []}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def make_client(gemini: FakeGemini) -> Callable[..., TestClient]:
    def _make(api_key: Optional[str] = TEST_API_KEY) -> TestClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(gemini))
        return TestClient(create_app(make_config(api_key), http_client=http_client))

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
