import httpx
import pytest
from prometheus_client import REGISTRY

from src.features.proxy_chat.client import GeminiClient, extract_error_message
from src.shared.errors import ProxyError


def _client(handler, api_key="key-abcdefgh-1234", **kwargs) -> GeminiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiClient(
        http_client,
        api_key=api_key,
        base_url=kwargs.get("base_url", "https://gemini.test/v1beta/"),
        model=kwargs.get("model", "gemini-test"),
    )


def _sample(name, labels=None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


@pytest.mark.parametrize(
    "data, expected",
    [
        ({"error": {"message": "quota exceeded"}}, "quota exceeded"),
        ({"error": {"message": ""}}, "Gemini API error"),
        ({"error": {"code": 400}}, "Gemini API error"),
        ({"error": "flat string"}, "Gemini API error"),
        ({}, "Gemini API error"),
        ([1, 2], "Gemini API error"),
        (None, "Gemini API error"),
    ],
)
def test_extract_error_message(data, expected):
    assert extract_error_message(data) == expected


def test_url_uses_model_and_strips_trailing_slash():
    client = _client(lambda request: httpx.Response(200, json={}))
    assert client.url == "https://gemini.test/v1beta/models/gemini-test:generateContent"


def test_configured_reflects_key():
    assert _client(lambda r: httpx.Response(200), api_key="k").configured
    assert not _client(lambda r: httpx.Response(200), api_key=None).configured


@pytest.mark.asyncio
async def test_generate_content_returns_parsed_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"candidates": [{"index": 0}]})

    data = await _client(handler).generate_content({"contents": []})

    assert data == {"candidates": [{"index": 0}]}
    assert seen[0].url.params["key"] == "key-abcdefgh-1234"


@pytest.mark.asyncio
async def test_generate_content_raises_upstream_status():
    handler = lambda request: httpx.Response(404, json={"error": {"message": "model not found"}})

    with pytest.raises(ProxyError) as exc_info:
        await _client(handler).generate_content({})

    assert exc_info.value.status_code == 404
    assert exc_info.value.to_response() == {"error": "model not found"}


@pytest.mark.asyncio
async def test_generate_content_counts_outcomes():
    before_ok = _sample("gemini_upstream_requests_total", {"outcome": "200"})
    before_error = _sample("gemini_upstream_requests_total", {"outcome": "error"})

    await _client(lambda r: httpx.Response(200, json={})).generate_content({})
    with pytest.raises(ProxyError):
        await _client(lambda r: httpx.Response(200, text="nope")).generate_content({})

    assert _sample("gemini_upstream_requests_total", {"outcome": "200"}) == before_ok + 1
    assert _sample("gemini_upstream_requests_total", {"outcome": "error"}) == before_error + 1


@pytest.mark.asyncio
async def test_generate_content_records_token_usage():
    before_sent = _sample("gemini_prompt_tokens_total")
    before_received = _sample("gemini_candidate_tokens_total")
    body = {"usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 30}}

    await _client(lambda r: httpx.Response(200, json=body)).generate_content({})

    assert _sample("gemini_prompt_tokens_total") == before_sent + 12
    assert _sample("gemini_candidate_tokens_total") == before_received + 30
