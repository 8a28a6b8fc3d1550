MAX_PAGE_SIZE = 100


def cap_page_size(page_size: int | None) -> int:
    """Notion caps list endpoints at 100 results per page."""
    return min(page_size or MAX_PAGE_SIZE, MAX_PAGE_SIZE)


def paging_params(page_size: int | None, start_cursor: str | None) -> dict:
    params: dict = {}
    if page_size:
        params["page_size"] = cap_page_size(page_size)
    if start_cursor:
        params["start_cursor"] = start_cursor
    return params


def page_of(result: dict, count_key: str) -> dict:
    results = result.get("results", [])
    return {
        "results": results,
        "hasMore": result.get("has_more", False),
        "nextCursor": result.get("next_cursor"),
        count_key: len(results),
    }
