from notion_relay.notion.client import NotionClient
from notion_relay.operations.paging import cap_page_size, page_of


async def search(
    client: NotionClient,
    *,
    query: str | None = None,
    filter: dict | None = None,
    sort: dict | None = None,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    body: dict = {"page_size": cap_page_size(page_size)}
    if query:
        body["query"] = query
    if filter:
        body["filter"] = filter
    if sort:
        body["sort"] = sort
    if start_cursor:
        body["start_cursor"] = start_cursor

    result = await client.call("/search", "POST", body)
    return page_of(result, "resultsCount")


async def list_databases(
    client: NotionClient,
    *,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    body: dict = {
        "filter": {"value": "database", "property": "object"},
        "page_size": cap_page_size(page_size),
    }
    if start_cursor:
        body["start_cursor"] = start_cursor

    result = await client.call("/search", "POST", body)
    databases = [
        {
            "id": db.get("id"),
            "url": db.get("url"),
            "createdTime": db.get("created_time"),
            "lastEditedTime": db.get("last_edited_time"),
            "title": db.get("title"),
            "description": db.get("description"),
            "properties": db.get("properties"),
            "parent": db.get("parent"),
            "archived": db.get("archived"),
        }
        for db in result.get("results", [])
    ]
    return {
        "databases": databases,
        "hasMore": result.get("has_more", False),
        "nextCursor": result.get("next_cursor"),
        "databaseCount": len(databases),
    }
