"""
Tests for the Gemini API client.

Real requests are replaced by an ``httpx.MockTransport``; the test-mode
guard is switched off for the tests that exercise the HTTP path.
"""

import json

import httpx
import pytest

from bookmark_cosmos.core.base_api_client import (
    TEST_MODE_ENV,
    APIClientError,
    AuthenticationError,
    RateLimitError,
)
from bookmark_cosmos.core.gemini_api_client import GeminiAPIClient

API_KEY = "AIza" + "x" * 35

SAMPLE = [
    {"id": "1", "title": "GitHub", "url": "https://github.com"},
    {"id": "2", "title": "Figma", "url": "https://figma.com"},
]


def gemini_response(text, usage=None):
    return {
        "candidates": [{"content": {"parts": [{"text": text}]}}],
        "usageMetadata": usage or {"promptTokenCount": 10, "candidatesTokenCount": 5},
    }


def make_client(handler, max_retries=0):
    client = GeminiAPIClient(API_KEY, model="test-model", max_retries=max_retries)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client._calculate_retry_delay = lambda attempt: 0
    return client


@pytest.fixture
def live_mode(monkeypatch):
    monkeypatch.delenv(TEST_MODE_ENV, raising=False)


class TestGeminiAPIClientTestMode:
    """Test the built-in test-mode responses."""

    @pytest.mark.asyncio
    async def test_mock_response_assigns_every_id(self):
        async with GeminiAPIClient(API_KEY) as client:
            result = await client.classify_batch(SAMPLE)

        assert result == {"1": "Mock", "2": "Mock"}
        assert client.total_input_tokens == 100

    @pytest.mark.asyncio
    async def test_empty_sample_makes_no_request(self):
        client = GeminiAPIClient(API_KEY)

        assert await client.classify_batch([]) == {}
        assert client.request_count == 0


class TestGeminiAPIClientHTTP:
    """Test requests through a mock transport."""

    @pytest.mark.asyncio
    async def test_request_shape_and_result(self, live_mode):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            payload = {"categorization": [{"id": "1", "category": "Development"}]}
            return httpx.Response(200, json=gemini_response(json.dumps(payload)))

        client = make_client(handler)
        result = await client.classify_batch(SAMPLE)
        await client._cleanup_client()

        assert result == {"1": "Development"}
        assert seen["url"].endswith("/models/test-model:generateContent")
        assert seen["key"] == API_KEY
        config = seen["body"]["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert "Bookmarks to process" in seen["body"]["contents"][0]["parts"][0]["text"]
        assert client.total_input_tokens == 10
        assert client.total_output_tokens == 5

    @pytest.mark.asyncio
    async def test_unauthorized(self, live_mode):
        client = make_client(lambda request: httpx.Response(401, json={}))

        with pytest.raises(AuthenticationError):
            await client.classify_batch(SAMPLE)

    @pytest.mark.asyncio
    async def test_rate_limit_without_retries(self, live_mode):
        client = make_client(lambda request: httpx.Response(429, json={}))

        with pytest.raises(RateLimitError):
            await client.classify_batch(SAMPLE)

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, live_mode):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503, json={})
            payload = {"categorization": [{"id": "2", "category": "Design"}]}
            return httpx.Response(200, json=gemini_response(json.dumps(payload)))

        client = make_client(handler, max_retries=2)

        assert await client.classify_batch(SAMPLE) == {"2": "Design"}
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_network_error_is_wrapped(self, live_mode):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        client = make_client(handler)

        with pytest.raises(APIClientError):
            await client.classify_batch(SAMPLE)
        assert client.error_count == 1

    @pytest.mark.asyncio
    async def test_no_candidates(self, live_mode):
        client = make_client(lambda request: httpx.Response(200, json={"candidates": []}))

        with pytest.raises(APIClientError):
            await client.classify_batch(SAMPLE)

    @pytest.mark.asyncio
    async def test_malformed_text(self, live_mode):
        client = make_client(
            lambda request: httpx.Response(200, json=gemini_response("not json"))
        )

        with pytest.raises(APIClientError):
            await client.classify_batch(SAMPLE)

    @pytest.mark.asyncio
    async def test_uninitialized_client(self, live_mode):
        client = GeminiAPIClient(API_KEY)

        with pytest.raises(APIClientError):
            await client.classify_batch(SAMPLE)

    @pytest.mark.asyncio
    async def test_api_key_is_masked_in_errors(self, live_mode):
        def handler(request):
            raise httpx.ConnectError(f"failed for key {API_KEY}")

        client = make_client(handler)

        with pytest.raises(APIClientError) as exc_info:
            await client.classify_batch(SAMPLE)
        assert API_KEY not in str(exc_info.value)


class TestUsageStatistics:
    def test_statistics(self):
        client = GeminiAPIClient(API_KEY, model="m")
        stats = client.get_usage_statistics()

        assert stats["provider"] == "gemini"
        assert stats["model"] == "m"
        assert stats["request_count"] == 0
