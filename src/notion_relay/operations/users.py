from notion_relay.notion.client import NotionClient
from notion_relay.operations.paging import page_of, paging_params
from notion_relay.utils.notion_id import parse_notion_id


async def get_user(client: NotionClient, *, user_id: str) -> dict:
    user = await client.call(f"/users/{parse_notion_id(user_id)}")
    return {
        "id": user.get("id"),
        "object": user.get("object"),
        "type": user.get("type"),
        "name": user.get("name"),
        "avatarUrl": user.get("avatar_url"),
        "person": user.get("person"),
        "bot": user.get("bot"),
    }


async def list_users(
    client: NotionClient,
    *,
    page_size: int | None = None,
    start_cursor: str | None = None,
) -> dict:
    result = await client.call("/users", params=paging_params(page_size, start_cursor))
    return page_of(result, "userCount")


async def get_bot_user(client: NotionClient) -> dict:
    """Describe the integration the API key belongs to."""
    me = await client.call("/users/me")
    bot = me.get("bot") or {}
    return {
        "id": me.get("id"),
        "object": me.get("object"),
        "type": me.get("type"),
        "name": me.get("name") or "Notion Integration",
        "bot": {
            "owner": bot.get("owner"),
            "workspaceName": bot.get("workspace_name"),
        },
        "capabilities": {
            "canRead": True,
            "canUpdate": True,
            "canCreate": True,
            "canDelete": True,
        },
    }
