"""Database operations."""

from notion_relay.notion.client import NotionClient
from notion_relay.notion.rich_text import format_rich_text
from notion_relay.operations.paging import cap_page_size, page_of
from notion_relay.utils.notion_id import parse_notion_id


def _database_summary(db: dict) -> dict:
    return {
        "id": db.get("id"),
        "url": db.get("url"),
        "createdTime": db.get("created_time"),
        "lastEditedTime": db.get("last_edited_time"),
        "title": db.get("title"),
        "properties": db.get("properties"),
        "parent": db.get("parent"),
    }


async def query_database(
    client: NotionClient,
    *,
    database_id: str,
    filter: dict | None = None,
    sorts: list[dict] | None = None,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    body: dict = {"page_size": cap_page_size(page_size)}
    if filter:
        body["filter"] = filter
    if sorts:
        body["sorts"] = sorts
    if start_cursor:
        body["start_cursor"] = start_cursor

    result = await client.call(
        f"/databases/{parse_notion_id(database_id)}/query", "POST", body
    )
    return page_of(result, "resultsCount")


async def create_database(
    client: NotionClient,
    *,
    parent_page_id: str,
    title: str,
    properties: dict,
    is_inline: bool = False,
    description: list[dict] | None = None,
) -> dict:
    body: dict = {
        "parent": {"type": "page_id", "page_id": parse_notion_id(parent_page_id)},
        "title": format_rich_text(title),
        "properties": properties,
        "is_inline": is_inline,
    }
    if description:
        body["description"] = description

    db = await client.call("/databases", "POST", body)
    return {**_database_summary(db), "isInline": db.get("is_inline")}


async def update_database(
    client: NotionClient,
    *,
    database_id: str,
    title: str | None = None,
    properties: dict | None = None,
    description: list[dict] | None = None,
) -> dict:
    body: dict = {}
    if title is not None:
        body["title"] = format_rich_text(title)
    if properties is not None:
        body["properties"] = properties
    if description is not None:
        body["description"] = description

    db = await client.call(f"/databases/{parse_notion_id(database_id)}", "PATCH", body)
    return _database_summary(db)


async def get_database_schema(client: NotionClient, *, database_id: str) -> dict:
    db = await client.call(f"/databases/{parse_notion_id(database_id)}")
    return {
        **_database_summary(db),
        "description": db.get("description"),
        "isInline": db.get("is_inline"),
        "archived": db.get("archived"),
    }
