"""Block content operations."""

from datetime import datetime, timezone

from notion_relay.notion.client import NotionClient
from notion_relay.notion.rich_text import create_text_block
from notion_relay.operations.paging import page_of, paging_params
from notion_relay.utils.notion_id import parse_notion_id


async def append_block_children(
    client: NotionClient,
    *,
    parent_id: str,
    children: list[dict | str],
    after: str | None = None,
) -> dict:
    """Append blocks to a page or block. Plain strings become paragraphs."""
    body: dict = {
        "children": [
            create_text_block(child) if isinstance(child, str) else child
            for child in children
        ],
    }
    if after:
        body["after"] = parse_notion_id(after)

    result = await client.call(
        f"/blocks/{parse_notion_id(parent_id)}/children", "PATCH", body
    )
    return page_of(result, "blockCount")


async def get_block_children(
    client: NotionClient,
    *,
    block_id: str,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    result = await client.call(
        f"/blocks/{parse_notion_id(block_id)}/children",
        params=paging_params(page_size, start_cursor),
    )
    return page_of(result, "blockCount")


async def update_block(
    client: NotionClient,
    *,
    block_id: str,
    content: dict | None = None,
    archived: bool | None = None,
) -> dict:
    """``content`` is the type-keyed payload, e.g. ``{"paragraph": {...}}``."""
    body = dict(content or {})
    if archived is not None:
        body["archived"] = archived

    block = await client.call(f"/blocks/{parse_notion_id(block_id)}", "PATCH", body)
    block_type = block.get("type")
    return {
        "id": block.get("id"),
        "type": block_type,
        "createdTime": block.get("created_time"),
        "lastEditedTime": block.get("last_edited_time"),
        "hasChildren": block.get("has_children"),
        "archived": block.get("archived"),
        "content": block.get(block_type) if block_type else None,
    }


async def delete_block(client: NotionClient, *, block_id: str) -> dict:
    clean_block_id = parse_notion_id(block_id)
    await client.call(f"/blocks/{clean_block_id}", "DELETE")
    return {
        "id": clean_block_id,
        "deleted": True,
        "deletedTime": datetime.now(timezone.utc).isoformat(),
    }
