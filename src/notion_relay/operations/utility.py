"""Local helpers exposed as operations; these make no API calls."""

from notion_relay.notion.client import NotionClient
from notion_relay.notion.property_parser import to_notion_properties
from notion_relay.notion.rich_text import format_rich_text


async def format_rich_text_op(
    client: NotionClient,
    *,
    text: str,
    annotations: dict | None = None,
    link: str | None = None,
) -> dict:
    return {
        "richText": format_rich_text(text, annotations, link),
        "plainText": text,
    }


async def parse_properties(
    client: NotionClient, *, properties: dict, schema: dict
) -> dict:
    notion_properties = to_notion_properties(properties, schema)
    return {
        "notionProperties": notion_properties,
        "originalProperties": properties,
        "processedCount": len(notion_properties),
    }
