"""Route Notion webhook events to the subscriptions that asked for them."""

import logging
from typing import Protocol

from notion_relay.db.repository import Repository
from notion_relay.utils.notion_id import parse_notion_id
from notion_relay.webhook.models import Namespace, SubscriberRegistration, WebhookEvent

logger = logging.getLogger(__name__)


class SubscriberRegistry(Protocol):
    async def list_subscribers(self, namespace: Namespace) -> list[SubscriberRegistration]: ...


class Dispatcher(Protocol):
    async def deliver(
        self,
        namespace: Namespace,
        registrations: list[SubscriberRegistration],
        event: WebhookEvent,
    ) -> None: ...


def matches(registration: SubscriberRegistration, event: WebhookEvent) -> bool:
    """Whether a registration's filters accept the event.

    Assumes the event already belongs to the registration's namespace.
    """
    if registration.event_types and event.type not in registration.event_types:
        return False

    if registration.entity_id:
        event_entity_id = event.entity_id
        if not event_entity_id:
            return False
        if parse_notion_id(event_entity_id) != parse_notion_id(registration.entity_id):
            return False

    return True


async def route_event(
    event: WebhookEvent,
    registry: SubscriberRegistry,
    dispatcher: Dispatcher,
) -> int:
    """Deliver an event to every matching registration in its namespace.

    Returns the number of registrations the event was delivered to. Events
    outside the known namespaces are dropped.
    """
    namespace = event.namespace
    if namespace is None:
        logger.warning("Received unknown webhook event type: %s", event.type)
        return 0

    candidates = await registry.list_subscribers(namespace)
    relevant = [r for r in candidates if matches(r, event)]

    if not relevant:
        logger.debug(
            "No %s subscriptions match event %s (%s)",
            namespace.value, event.id, event.type,
        )
        return 0

    await dispatcher.deliver(namespace, relevant, event)
    logger.info(
        "Delivered event %s (%s) to %d subscription(s)",
        event.id, event.type, len(relevant),
    )
    return len(relevant)


class OutboxDispatcher:
    """Dispatcher that records each delivery in the repository's outbox table."""

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    async def deliver(
        self,
        namespace: Namespace,
        registrations: list[SubscriberRegistration],
        event: WebhookEvent,
    ) -> None:
        await self._repo.record_deliveries(
            [r.id for r in registrations],
            str(event.id) if event.id is not None else None,
            event.type,
            event.as_delivered(),
        )
