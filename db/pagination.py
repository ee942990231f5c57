"""Length-aware pagination of select queries and response header formatting."""
import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate(
    session: AsyncSession,
    query: Select,
    count_query: Select,
    per_page: int,
    current_page: int,
) -> tuple[list[Any], dict[str, int]]:
    """Run ``query`` for one page and count the rows matched by ``count_query``.

    Returns the page's ORM objects and the pagination metadata:
    perPage, currentPage, totalCount, lastPage, from, to.
    """
    total_count = (
        await session.execute(
            select(func.count()).select_from(count_query.order_by(None).subquery())
        )
    ).scalar_one()

    offset = (current_page - 1) * per_page
    result = await session.execute(query.limit(per_page).offset(offset))
    items = list(result.scalars().all())

    pagination = {
        "perPage": per_page,
        "currentPage": current_page,
        "totalCount": total_count,
        "lastPage": max(1, math.ceil(total_count / per_page)),
        "from": offset + 1 if items else 0,
        "to": offset + len(items) if items else 0,
    }
    return items, pagination


def _page_link(path: str, page: int, per_page: int, rel: str) -> str:
    return f'<{path}?currentPage={page}&perPage={per_page}>; rel="{rel}"'


def format_pagination_content_range(
    resource: str, path: str, pagination: dict[str, int]
) -> dict[str, str]:
    """Build the list response headers from pagination metadata.

    Example Link value for page 1 of 2 with perPage=2:
        </api/organizations?currentPage=1&perPage=2>; rel="first",
        </api/organizations?currentPage=1&perPage=2>; rel="prev", ...
    """
    per_page = pagination["perPage"]
    current_page = pagination["currentPage"]
    last_page = pagination["lastPage"]
    total = pagination["totalCount"]

    links = [
        _page_link(path, 1, per_page, "first"),
        _page_link(path, min(max(1, current_page - 1), last_page), per_page, "prev"),
        _page_link(path, current_page, per_page, "self"),
        _page_link(path, min(current_page + 1, last_page), per_page, "next"),
        _page_link(path, last_page, per_page, "last"),
    ]

    if pagination["to"]:
        content_range = f"{resource} {pagination['from'] - 1}-{pagination['to'] - 1}/{total}"
    else:
        content_range = f"{resource} */{total}"

    return {
        "X-Total-Count": str(total),
        "Content-Range": content_range,
        "Link": ",".join(links),
        "Access-Control-Expose-Headers": "X-Total-Count, Content-Range, Link",
    }
