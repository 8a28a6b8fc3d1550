import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_API_VERSION = "2022-06-28"

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_TIMEOUT_MS = 30000

METHODS = ("GET", "POST", "PATCH", "DELETE")

Sleep = Callable[[float], Awaitable[None]]


class NotionAPIError(Exception):
    """Base class for failed Notion API calls."""

    def __init__(
        self, message: str, *, status: int | None = None, code: str | None = None
    ):
        self.status = status
        self.code = code
        self.message = message
        super().__init__(message)


class NotionClientError(NotionAPIError):
    """Raised on a 4xx response, including a 429 that outlived the retry budget."""


class NotionServerError(NotionAPIError):
    """Raised when 5xx responses exhausted the retry budget."""


class NotionTimeoutError(NotionAPIError):
    """Raised when every attempt timed out."""


class NotionTransportError(NotionAPIError):
    """Raised when the request could not be sent at all (DNS, refused connection)."""


@dataclass(frozen=True)
class ApiCallRequest:
    endpoint: str
    method: str = "GET"
    body: dict | list | None = None
    params: dict[str, Any] = field(default_factory=dict)
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if self.method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if self.retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")


def _backoff_seconds(attempt: int) -> float:
    return float(2**attempt)


def _retry_after_seconds(resp: httpx.Response) -> float | None:
    value = resp.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _error_fields(resp: httpx.Response) -> tuple[str | None, str]:
    """Pull Notion's {code, message} out of an error body, if it has one."""
    try:
        data = resp.json()
    except ValueError:
        return None, "Unknown error"
    if not isinstance(data, dict):
        return None, "Unknown error"
    return data.get("code"), data.get("message") or "Unknown error"


async def execute(
    http: httpx.AsyncClient,
    api_key: str,
    request: ApiCallRequest,
    *,
    sleep: Sleep = asyncio.sleep,
) -> Any:
    """Perform one logical Notion API call with timeout, retry and error classification.

    Rate limits, server errors and timeouts are retried with exponential
    backoff (1s, 2s, 4s ...) until ``request.retry_attempts`` attempts have
    been made. Other client errors fail on the first attempt.
    """
    url = f"{NOTION_API_BASE}{request.endpoint}"
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Notion-Version": NOTION_API_VERSION,
        "Content-Type": "application/json",
    }
    kwargs: dict[str, Any] = {"headers": headers}
    if request.params:
        kwargs["params"] = request.params
    if request.method != "GET":
        kwargs["json"] = request.body if request.body is not None else {}

    timeout_s = request.timeout_ms / 1000
    last_error: NotionAPIError | None = None

    for attempt in range(request.retry_attempts):
        is_last = attempt == request.retry_attempts - 1
        try:
            resp = await asyncio.wait_for(
                http.request(request.method, url, **kwargs), timeout=timeout_s
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            last_error = NotionTimeoutError(
                f"Notion API request timeout after {request.timeout_ms}ms"
            )
            if is_last:
                break
            delay = _backoff_seconds(attempt)
            logger.warning(
                "Notion %s %s timed out (attempt %d/%d), retrying in %.1fs",
                request.method, request.endpoint, attempt + 1,
                request.retry_attempts, delay,
            )
            await sleep(delay)
            continue
        except httpx.TransportError as exc:
            raise NotionTransportError(
                f"Notion API request failed: {exc}"
            ) from exc

        if resp.is_success:
            try:
                return resp.json()
            except ValueError as exc:
                raise NotionAPIError(
                    "Notion API returned a non-JSON response",
                    status=resp.status_code,
                ) from exc

        code, message = _error_fields(resp)

        if resp.status_code == 429:
            last_error = NotionClientError(
                f"Notion API error ({code or 'rate_limited'}): {message}",
                status=429,
                code=code or "rate_limited",
            )
            if is_last:
                break
            delay = _retry_after_seconds(resp)
            if delay is None:
                delay = _backoff_seconds(attempt)
            logger.warning(
                "Notion rate limited on %s %s, retrying after %.1f seconds",
                request.method, request.endpoint, delay,
            )
            await sleep(delay)
            continue

        if 400 <= resp.status_code < 500:
            raise NotionClientError(
                f"Notion API error ({code}): {message}",
                status=resp.status_code,
                code=code,
            )

        last_error = NotionServerError(
            f"Notion API error ({resp.status_code}): {message}",
            status=resp.status_code,
            code=code,
        )
        if resp.status_code < 500 or is_last:
            break
        delay = _backoff_seconds(attempt)
        logger.warning(
            "Notion %s %s returned %d (attempt %d/%d), retrying in %.1fs",
            request.method, request.endpoint, resp.status_code, attempt + 1,
            request.retry_attempts, delay,
        )
        await sleep(delay)

    raise last_error or NotionAPIError("Failed to call Notion API")


class NotionClient:
    def __init__(
        self,
        api_key: str,
        *,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        sleep: Sleep = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._retry_attempts = retry_attempts
        self._timeout_ms = timeout_ms
        self._sleep = sleep
        # Timeouts are enforced per attempt by execute(); httpx's own limit is disabled.
        self._client = httpx.AsyncClient(timeout=None, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: dict | list | None = None,
        *,
        params: dict[str, Any] | None = None,
        retry_attempts: int | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        request = ApiCallRequest(
            endpoint=endpoint,
            method=method,
            body=body,
            params=params or {},
            retry_attempts=retry_attempts or self._retry_attempts,
            timeout_ms=timeout_ms or self._timeout_ms,
        )
        return await execute(self._client, self._api_key, request, sleep=self._sleep)
