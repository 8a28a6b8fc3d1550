"""Tests for the Notion API call executor's retry and classification logic."""

import asyncio
import json

import httpx
import pytest

from notion_relay.notion.client import (
    NOTION_API_VERSION,
    ApiCallRequest,
    NotionClient,
    NotionClientError,
    NotionServerError,
    NotionTimeoutError,
    NotionTransportError,
)


class FakeSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _client(handler, sleep=None, **kwargs) -> NotionClient:
    return NotionClient(
        "secret_test",
        transport=httpx.MockTransport(handler),
        sleep=sleep or FakeSleep(),
        **kwargs,
    )


def _sequence(*responses):
    """Handler returning the given responses in order, recording each request."""
    calls: list[httpx.Request] = []
    remaining = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        item = remaining.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return handler, calls


def _error(status: int, code: str = "error", message: str = "boom", headers=None):
    return httpx.Response(
        status, json={"object": "error", "status": status, "code": code, "message": message},
        headers=headers,
    )


class TestSuccess:
    @pytest.mark.asyncio
    async def test_returns_decoded_body_unmodified(self):
        body = {"object": "page", "id": "abc", "properties": {"x": [1, 2, {"y": None}]}}
        handler, calls = _sequence(httpx.Response(200, json=body))
        client = _client(handler)

        assert await client.call("/pages/abc") == body
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_request_headers_and_url(self):
        handler, calls = _sequence(httpx.Response(200, json={}))
        client = _client(handler)

        await client.call("/users/me")

        [req] = calls
        assert str(req.url) == "https://api.notion.com/v1/users/me"
        assert req.method == "GET"
        assert req.headers["Authorization"] == "Bearer secret_test"
        assert req.headers["Notion-Version"] == NOTION_API_VERSION
        assert req.content == b""

    @pytest.mark.asyncio
    async def test_non_get_sends_json_body(self):
        handler, calls = _sequence(httpx.Response(200, json={"id": "p"}))
        client = _client(handler)

        await client.call("/pages", "POST", {"parent": {"page_id": "x"}})

        assert json.loads(calls[0].content) == {"parent": {"page_id": "x"}}
        assert calls[0].headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_query_params(self):
        handler, calls = _sequence(httpx.Response(200, json={"results": []}))
        client = _client(handler)

        await client.call("/users", params={"page_size": 10})

        assert calls[0].url.params["page_size"] == "10"


class TestClientErrors:
    @pytest.mark.asyncio
    async def test_4xx_fails_after_one_attempt(self):
        handler, calls = _sequence(
            _error(400, "validation_error", "body failed validation"),
            httpx.Response(200, json={}),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        with pytest.raises(NotionClientError) as exc_info:
            await client.call("/pages", "POST", {})

        assert len(calls) == 1
        assert sleep.delays == []
        assert exc_info.value.status == 400
        assert exc_info.value.code == "validation_error"
        assert "body failed validation" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_404_not_retried(self):
        handler, calls = _sequence(_error(404, "object_not_found", "Could not find page"))
        client = _client(handler)

        with pytest.raises(NotionClientError) as exc_info:
            await client.call("/pages/missing")

        assert exc_info.value.code == "object_not_found"
        assert len(calls) == 1


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_honors_retry_after(self):
        handler, calls = _sequence(
            _error(429, "rate_limited", "slow down", headers={"Retry-After": "7"}),
            httpx.Response(200, json={"ok": True}),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        assert await client.call("/search", "POST", {}) == {"ok": True}
        assert sleep.delays == [7]
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_exponential_backoff_without_hint(self):
        handler, calls = _sequence(
            _error(429, "rate_limited"),
            _error(429, "rate_limited"),
            httpx.Response(200, json={}),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        await client.call("/search", "POST", {})
        assert sleep.delays == [1, 2]

    @pytest.mark.asyncio
    async def test_exhausted_budget_raises_client_error(self):
        handler, calls = _sequence(*[_error(429, "rate_limited", "slow down")] * 3)
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        with pytest.raises(NotionClientError) as exc_info:
            await client.call("/search", "POST", {})

        assert exc_info.value.status == 429
        assert len(calls) == 3
        # No sleep after the final attempt
        assert len(sleep.delays) == 2


class TestServerErrors:
    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        handler, calls = _sequence(
            _error(502, "bad_gateway"),
            httpx.Response(200, json={"id": "p"}),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        assert await client.call("/pages/p") == {"id": "p"}
        assert sleep.delays == [1]

    @pytest.mark.asyncio
    async def test_exhausted_budget_carries_last_status(self):
        handler, calls = _sequence(
            _error(500, "internal_server_error", "first"),
            _error(502, "bad_gateway", "second"),
            _error(503, "service_unavailable", "Notion is unavailable"),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        with pytest.raises(NotionServerError) as exc_info:
            await client.call("/pages/p")

        assert len(calls) == 3
        assert sleep.delays == [1, 2]
        assert exc_info.value.status == 503
        assert "Notion is unavailable" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_per_call_retry_budget(self):
        handler, calls = _sequence(*[_error(500)] * 5)
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep)

        with pytest.raises(NotionServerError):
            await client.call("/pages/p", retry_attempts=5)

        assert len(calls) == 5
        assert sleep.delays == [1, 2, 4, 8]

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        handler, calls = _sequence(httpx.Response(500, text="<html>oops</html>"))
        client = _client(handler, retry_attempts=1)

        with pytest.raises(NotionServerError, match="Unknown error"):
            await client.call("/pages/p")


class TestTimeouts:
    @pytest.mark.asyncio
    async def test_transport_timeout_retried_then_fails(self):
        handler, calls = _sequence(
            httpx.ReadTimeout("slow"),
            httpx.ReadTimeout("slow"),
            httpx.ReadTimeout("slow"),
        )
        sleep = FakeSleep()
        client = _client(handler, sleep=sleep, timeout_ms=1500)

        with pytest.raises(NotionTimeoutError, match="1500ms"):
            await client.call("/pages/p")

        assert len(calls) == 3
        assert sleep.delays == [1, 2]

    @pytest.mark.asyncio
    async def test_attempt_aborted_when_deadline_passes(self):
        attempts = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                await asyncio.sleep(1)
            return httpx.Response(200, json={"attempt": attempts})

        client = _client(handler, timeout_ms=20)

        assert await client.call("/pages/p") == {"attempt": 2}

    @pytest.mark.asyncio
    async def test_connection_errors_not_retried(self):
        handler, calls = _sequence(httpx.ConnectError("refused"))
        client = _client(handler)

        with pytest.raises(NotionTransportError):
            await client.call("/pages/p")

        assert len(calls) == 1


class TestApiCallRequest:
    def test_rejects_unknown_method(self):
        with pytest.raises(ValueError):
            ApiCallRequest(endpoint="/pages", method="PUT")

    def test_is_immutable(self):
        req = ApiCallRequest(endpoint="/pages")
        with pytest.raises(AttributeError):
            req.method = "POST"

    def test_defaults(self):
        req = ApiCallRequest(endpoint="/pages")
        assert req.retry_attempts == 3
        assert req.timeout_ms == 30000
