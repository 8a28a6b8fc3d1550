"""Coerce plain Python values into Notion property payloads using a database schema."""

import logging
from datetime import date, datetime

from notion_relay.notion.rich_text import format_rich_text

logger = logging.getLogger(__name__)

# Computed by Notion, cannot be written
READ_ONLY_TYPES = {"formula", "rollup"}


def _as_list(value) -> list:
    return value if isinstance(value, list) else [value]


def to_property_value(prop_type: str, value) -> dict | None:
    """Build the Notion payload for one property.

    Returns None for read-only types, which callers should skip.
    """
    if prop_type in READ_ONLY_TYPES:
        return None

    if prop_type == "title":
        return {"title": format_rich_text(str(value))}

    if prop_type == "rich_text":
        return {"rich_text": format_rich_text(str(value))}

    if prop_type == "number":
        return {"number": float(value) if not isinstance(value, (int, float)) else value}

    if prop_type == "select":
        return {"select": {"name": str(value)}}

    if prop_type == "multi_select":
        return {"multi_select": [{"name": str(item)} for item in _as_list(value)]}

    if prop_type == "date":
        start = value.isoformat() if isinstance(value, (date, datetime)) else str(value)
        return {"date": {"start": start}}

    if prop_type == "checkbox":
        return {"checkbox": bool(value)}

    if prop_type in ("url", "email", "phone_number"):
        return {prop_type: str(value)}

    if prop_type == "people":
        return {
            "people": [{"object": "user", "id": str(user_id)} for user_id in _as_list(value)]
        }

    if prop_type == "relation":
        return {"relation": [{"id": str(page_id)} for page_id in _as_list(value)]}

    logger.debug("Passing through unrecognized Notion property type: %s", prop_type)
    return {prop_type: value}


def to_notion_properties(values: dict, schema: dict) -> dict:
    """Convert ``{name: plain value}`` to Notion property payloads.

    ``schema`` is a database's ``properties`` object; names missing from it
    are skipped.
    """
    result = {}

    for name, value in values.items():
        prop_schema = schema.get(name)
        if not prop_schema:
            logger.debug("Property %r not in schema, skipping", name)
            continue

        payload = to_property_value(prop_schema.get("type"), value)
        if payload is not None:
            result[name] = payload

    return result
