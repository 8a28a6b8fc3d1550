"""Pydantic models for Notion webhook payloads and subscriber registrations."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Namespace(str, Enum):
    """Event type prefix; each has its own subscription category."""

    PAGE = "page"
    DATABASE = "database"
    DATA_SOURCE = "data_source"
    COMMENT = "comment"


def _id_string(value) -> bool:
    return isinstance(value, str) and bool(value)


class WebhookEvent(BaseModel):
    """A single Notion webhook event.

    Only ``type`` is enforced. Everything else is kept as received, whatever
    its shape, so the event can be delivered unmodified.
    """

    model_config = ConfigDict(extra="allow")

    type: str  # e.g. "page.created", "comment.deleted"
    id: Any = None  # unique event ID
    timestamp: Any = None
    workspace_id: Any = None
    authors: Any = Field(default_factory=list)  # [{"id": ..., "type": ...}]
    entity: Any = None  # {"id": ..., "type": ...}
    data: Any = Field(default_factory=dict)

    @property
    def namespace(self) -> Namespace | None:
        prefix, sep, _ = self.type.partition(".")
        if not sep:
            return None
        try:
            return Namespace(prefix)
        except ValueError:
            return None

    @property
    def entity_id(self) -> str | None:
        """ID the event is about, as used by subscription entity filters.

        Comment events are keyed on the page they were left on.
        """
        data = self.data if isinstance(self.data, dict) else {}
        if self.namespace is Namespace.COMMENT:
            parent = data.get("parent")
            if isinstance(parent, dict) and _id_string(parent.get("page_id")):
                return parent["page_id"]
        elif _id_string(data.get("id")):
            return data["id"]
        if isinstance(self.entity, dict) and _id_string(self.entity.get("id")):
            return self.entity["id"]
        return None

    def as_delivered(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class SubscriberRegistration(BaseModel):
    """A standing request for events in one namespace."""

    model_config = ConfigDict(frozen=True)

    id: int
    namespace: Namespace
    event_types: tuple[str, ...] = ()
    entity_id: str | None = None
