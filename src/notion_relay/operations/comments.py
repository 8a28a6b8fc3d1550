from notion_relay.notion.client import NotionClient
from notion_relay.notion.rich_text import format_rich_text
from notion_relay.operations.paging import page_of, paging_params
from notion_relay.utils.notion_id import parse_notion_id


async def create_comment(
    client: NotionClient,
    *,
    page_id: str,
    rich_text: list[dict] | str,
    discussion_id: str | None = None,
) -> dict:
    """Comment on a page, or reply in an existing discussion thread."""
    clean_page_id = parse_notion_id(page_id)
    if isinstance(rich_text, str):
        rich_text = format_rich_text(rich_text)

    body: dict = {"parent": {"page_id": clean_page_id}, "rich_text": rich_text}
    if discussion_id:
        body["discussion_id"] = discussion_id

    comment = await client.call("/comments", "POST", body)
    return {
        "id": comment.get("id"),
        "parentId": clean_page_id,
        "discussionId": comment.get("discussion_id"),
        "createdTime": comment.get("created_time"),
        "lastEditedTime": comment.get("last_edited_time"),
        "createdBy": comment.get("created_by"),
        "richText": comment.get("rich_text"),
    }


async def get_comments(
    client: NotionClient,
    *,
    block_id: str,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    params = {"block_id": parse_notion_id(block_id), **paging_params(page_size, start_cursor)}
    result = await client.call("/comments", params=params)
    return page_of(result, "commentCount")
