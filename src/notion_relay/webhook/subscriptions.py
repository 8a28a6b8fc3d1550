"""Host-side management of subscriber registrations and their delivery outbox."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator

from notion_relay.db.repository import Repository
from notion_relay.utils.notion_id import is_notion_id, parse_notion_id
from notion_relay.webhook.models import Namespace, SubscriberRegistration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions")

# Injected at app startup
_repo: Repository | None = None


def configure(repo: Repository) -> None:
    global _repo
    _repo = repo


class SubscriptionCreate(BaseModel):
    namespace: Namespace
    event_types: list[str] = []
    entity_id: str | None = None

    @field_validator("entity_id")
    @classmethod
    def _normalize_entity_id(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not is_notion_id(value):
            raise ValueError("entity_id must be a Notion ID or URL")
        return parse_notion_id(value)


@router.post("", status_code=201)
async def create_subscription(body: SubscriptionCreate) -> SubscriberRegistration:
    prefix = f"{body.namespace.value}."
    foreign = [t for t in body.event_types if not t.startswith(prefix)]
    if foreign:
        raise HTTPException(
            status_code=422,
            detail=f"Event types outside the {body.namespace.value} namespace: {foreign}",
        )

    registration = await _repo.add_subscription(
        body.namespace, body.event_types, body.entity_id
    )
    logger.info(
        "Registered %s subscription %d", registration.namespace.value, registration.id
    )
    return registration


@router.get("")
async def list_subscriptions(namespace: Namespace | None = None) -> list[SubscriberRegistration]:
    return await _repo.list_subscribers(namespace)


@router.delete("/{subscription_id}", status_code=204)
async def delete_subscription(subscription_id: int) -> None:
    if not await _repo.remove_subscription(subscription_id):
        raise HTTPException(status_code=404, detail="Subscription not found")
    logger.info("Removed subscription %d", subscription_id)


@router.get("/{subscription_id}/deliveries")
async def list_deliveries(subscription_id: int, limit: int = 100) -> list[dict]:
    if await _repo.get_subscription(subscription_id) is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    deliveries = await _repo.list_deliveries(subscription_id, limit=min(limit, 1000))
    return [
        {
            "id": d.id,
            "eventId": d.event_id,
            "eventType": d.event_type,
            "deliveredAt": d.delivered_at.isoformat(),
            "event": d.payload,
        }
        for d in deliveries
    ]
