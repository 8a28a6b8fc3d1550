"""Page operations: create, read, update and archive Notion pages."""

from notion_relay.notion.client import NotionClient
from notion_relay.notion.rich_text import format_rich_text, icon_payload
from notion_relay.utils.notion_id import parse_notion_id

# Distinguishes "not supplied" from an explicit None (which clears a field)
_UNSET = object()


def _page_summary(page: dict) -> dict:
    return {
        "id": page.get("id"),
        "url": page.get("url"),
        "createdTime": page.get("created_time"),
        "lastEditedTime": page.get("last_edited_time"),
        "properties": page.get("properties"),
        "parent": page.get("parent"),
        "archived": page.get("archived"),
    }


async def create_page(
    client: NotionClient,
    *,
    parent_type: str,
    parent_id: str,
    title: str,
    properties: dict | None = None,
    content: list[dict] | None = None,
    icon: str | dict | None = None,
    cover: dict | None = None,
    template_type: str | None = None,
    template_id: str | None = None,
) -> dict:
    """Create a page under a page or database parent."""
    if parent_type not in ("page", "database"):
        raise ValueError(f"parent_type must be 'page' or 'database', got {parent_type!r}")

    clean_parent_id = parse_notion_id(parent_id)
    body: dict = {
        "parent": (
            {"database_id": clean_parent_id}
            if parent_type == "database"
            else {"page_id": clean_parent_id}
        ),
    }

    if parent_type == "database" and properties:
        body["properties"] = properties
    else:
        body["properties"] = {"title": {"title": format_rich_text(title)}}

    if icon:
        body["icon"] = icon_payload(icon)
    if cover:
        body["cover"] = cover

    # Notion rejects children when a template is applied
    if content and not template_type:
        body["children"] = content

    if template_type == "default":
        body["template"] = {"type": "default"}
    elif template_type == "template_id" and template_id:
        body["template"] = {
            "type": "template_id",
            "template_id": parse_notion_id(template_id),
        }

    page = await client.call("/pages", "POST", body)
    return _page_summary(page)


async def get_page(
    client: NotionClient, *, page_id: str, include_children: bool = False
) -> dict:
    clean_page_id = parse_notion_id(page_id)
    page = await client.call(f"/pages/{clean_page_id}")

    children = None
    if include_children:
        blocks = await client.call(f"/blocks/{clean_page_id}/children")
        children = blocks.get("results")

    return {
        **_page_summary(page),
        "createdBy": page.get("created_by"),
        "lastEditedBy": page.get("last_edited_by"),
        "icon": page.get("icon"),
        "cover": page.get("cover"),
        "children": children,
    }


async def update_page(
    client: NotionClient,
    *,
    page_id: str,
    properties=_UNSET,
    archived=_UNSET,
    icon=_UNSET,
    cover=_UNSET,
) -> dict:
    """PATCH only the fields the caller supplied; None clears icon/cover."""
    body: dict = {}
    if properties is not _UNSET:
        body["properties"] = properties
    if archived is not _UNSET:
        body["archived"] = archived
    if icon is not _UNSET:
        body["icon"] = icon_payload(icon)
    if cover is not _UNSET:
        body["cover"] = cover

    page = await client.call(f"/pages/{parse_notion_id(page_id)}", "PATCH", body)
    return {
        **_page_summary(page),
        "icon": page.get("icon"),
        "cover": page.get("cover"),
    }


async def delete_page(client: NotionClient, *, page_id: str) -> dict:
    # The API has no hard delete; archiving moves the page to trash
    page = await client.call(
        f"/pages/{parse_notion_id(page_id)}", "PATCH", {"archived": True}
    )
    return {
        "id": page.get("id"),
        "archived": True,
        "archivedTime": page.get("last_edited_time"),
    }
