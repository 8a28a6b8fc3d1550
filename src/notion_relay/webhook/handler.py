"""Webhook endpoint for receiving Notion events."""

import json
import logging

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from notion_relay.webhook.dispatch import Dispatcher, SubscriberRegistry, route_event
from notion_relay.webhook.models import WebhookEvent
from notion_relay.webhook.signature import verify_signature
from notion_relay.webhook.tokens import VerificationTokenManager

logger = logging.getLogger(__name__)

router = APIRouter()

# These will be injected at app startup
_tokens: VerificationTokenManager | None = None
_registry: SubscriberRegistry | None = None
_dispatcher: Dispatcher | None = None


def configure(
    tokens: VerificationTokenManager,
    registry: SubscriberRegistry,
    dispatcher: Dispatcher,
) -> None:
    global _tokens, _registry, _dispatcher
    _tokens = tokens
    _registry = registry
    _dispatcher = dispatcher


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/webhook/notion")
async def handle_webhook(
    request: Request,
    x_notion_signature: str | None = Header(None),
):
    """Handle incoming Notion webhook events."""
    body = await request.body()

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Received webhook with malformed JSON body")
        return _error(400, "Invalid JSON payload")

    # Handle verification handshake
    if isinstance(payload, dict):
        token = payload.get("verification_token")
        if isinstance(token, str) and token:
            logger.info("Received webhook verification handshake")
            await _tokens.provision(token)
            return {"verification_token": token}

    # Verify signature
    secret = await _tokens.current()
    if secret:
        if not verify_signature(body, x_notion_signature, secret):
            return _error(403, "Invalid webhook signature")
    else:
        logger.warning(
            "No verification token stored yet; accepting webhook without "
            "signature verification until the handshake completes"
        )

    if not isinstance(payload, dict) or not payload.get("type"):
        logger.warning("Received webhook payload without type field")
        return _error(400, "Invalid payload: missing type")

    try:
        event = WebhookEvent.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Rejecting malformed webhook payload: %s", exc)
        return _error(400, "Invalid payload")

    logger.info("Received Notion webhook event: %s", event.type)

    try:
        await route_event(event, _registry, _dispatcher)
    except Exception:
        logger.exception("Error handling webhook event %s", event.id)
        return _error(500, "Internal error processing webhook")

    return {"status": "ok"}


@router.get("/webhook/notion/verification-token")
async def get_verification_token():
    """Expose the token so the operator can paste it into Notion's setup UI."""
    await _tokens.resync()
    return {"verification_token": _tokens.signal.value}
