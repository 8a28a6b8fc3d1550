"""HTTP surface for invoking operation units by name."""

import inspect
import logging
import re

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from notion_relay.notion.client import (
    NotionAPIError,
    NotionClient,
    NotionClientError,
    NotionTimeoutError,
)
from notion_relay.operations.registry import OPERATIONS

logger = logging.getLogger(__name__)

router = APIRouter()

# Injected at app startup
_notion_client: NotionClient | None = None

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def configure(notion_client: NotionClient) -> None:
    global _notion_client
    _notion_client = notion_client


def to_snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def _error_status(exc: NotionAPIError) -> int:
    if isinstance(exc, NotionClientError) and exc.status:
        return exc.status
    if isinstance(exc, NotionTimeoutError):
        return 504
    return 502


@router.post("/operations/{name}")
async def run_operation(name: str, inputs: dict | None = Body(None)):
    """Run one operation with the JSON body as its inputs (camelCase or snake_case)."""
    operation = OPERATIONS.get(name)
    if operation is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown operation: {name}"})

    kwargs = {to_snake_case(key): value for key, value in (inputs or {}).items()}
    try:
        inspect.signature(operation).bind(_notion_client, **kwargs)
    except TypeError as exc:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    try:
        return await operation(_notion_client, **kwargs)
    except ValueError as exc:
        return JSONResponse(status_code=422, content={"error": str(exc)})
    except NotionAPIError as exc:
        status = _error_status(exc)
        if status >= 500:
            logger.error("Operation %s failed: %s", name, exc)
        return JSONResponse(
            status_code=status, content={"error": exc.message, "code": exc.code}
        )
