import re

# Notion IDs are 32 hex characters, optionally rendered as a hyphenated UUID
_HEX_ID_LENGTH = 32
_HEX_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")


def _strip_hyphens(value: str) -> str:
    return value.replace("-", "")


def _canonical(value: str) -> str:
    """Strip hyphens; hex IDs are lowercased to match what Notion sends."""
    stripped = _strip_hyphens(value)
    return stripped.lower() if _HEX_ID_RE.match(stripped) else stripped


def parse_notion_id(id_or_url: str) -> str:
    """Normalize a Notion page/database/block ID or URL to the bare 32-char form.

    Accepts:
        5c6a28216bb14a7eb6e1c50111515c3d
        5c6a2821-6bb1-4a7e-b6e1-c50111515c3d
        https://www.notion.so/My-Page-5c6a28216bb14a7eb6e1c50111515c3d
        https://www.notion.so/workspace/5c6a28216bb14a7eb6e1c50111515c3d?v=abc

    IDs come back lowercased. Anything that doesn't look like one of those is
    returned with hyphens removed.
    """
    value = id_or_url.strip()

    if value.startswith("http"):
        last_part = value.rstrip("/").split("/")[-1]
        id_part = last_part.split("?")[0].split("#")[0]

        # Page URLs are "<slug>-<id>"; the ID is the last dash-separated chunk
        possible_id = id_part.split("-")[-1]
        if len(_strip_hyphens(possible_id)) == _HEX_ID_LENGTH:
            return _canonical(possible_id)

        if len(_strip_hyphens(id_part)) == _HEX_ID_LENGTH:
            return _canonical(id_part)

    return _canonical(value)


def is_notion_id(value: str) -> bool:
    return bool(_HEX_ID_RE.match(parse_notion_id(value)))
