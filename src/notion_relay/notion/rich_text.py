"""Build Notion rich text and block payloads from plain Python values."""

ANNOTATION_FLAGS = ("bold", "italic", "strikethrough", "underline", "code")

TEXT_BLOCK_TYPES = ("paragraph", "heading_1", "heading_2", "heading_3")

EMOJI_SHORTCODES = {
    ":rocket:": "\U0001F680",
    ":star:": "⭐",
    ":fire:": "\U0001F525",
    ":check:": "✅",
    ":x:": "❌",
    ":warning:": "⚠️",
    ":bulb:": "\U0001F4A1",
    ":book:": "\U0001F4DA",
    ":folder:": "\U0001F4C1",
    ":calendar:": "\U0001F4C5",
    ":clock:": "\U0001F550",
    ":email:": "\U0001F4E7",
    ":phone:": "\U0001F4DE",
    ":globe:": "\U0001F310",
    ":heart:": "❤️",
    ":thumbsup:": "\U0001F44D",
    ":thumbsdown:": "\U0001F44E",
    ":smile:": "\U0001F60A",
    ":tada:": "\U0001F389",
    ":sparkles:": "✨",
}


def format_rich_text(
    text: str, annotations: dict | None = None, url: str | None = None
) -> list[dict]:
    """Wrap plain text in a single-segment Notion rich text array."""
    annotations = annotations or {}
    formatted = {flag: bool(annotations.get(flag, False)) for flag in ANNOTATION_FLAGS}
    formatted["color"] = annotations.get("color") or "default"
    return [
        {
            "type": "text",
            "text": {
                "content": text,
                "link": {"url": url} if url else None,
            },
            "annotations": formatted,
        }
    ]


def create_text_block(text: str, block_type: str = "paragraph") -> dict:
    if block_type not in TEXT_BLOCK_TYPES:
        raise ValueError(f"Unsupported text block type: {block_type}")
    return {
        "type": block_type,
        block_type: {"rich_text": format_rich_text(text)},
    }


def parse_emoji(emoji: str) -> str:
    """Translate a ``:shortcode:`` to its emoji; unknown input is returned as-is."""
    return EMOJI_SHORTCODES.get(emoji, emoji)


def icon_payload(icon: str | dict | None) -> dict | None:
    """Notion icon object from an emoji/shortcode string or a ready-made object."""
    if icon is None:
        return None
    if isinstance(icon, str):
        return {"type": "emoji", "emoji": parse_emoji(icon)}
    return icon
