"""Sanitizers for list query parameters (filters, sort, pagination).

Raw values come straight from the query string: either already decoded
(dict / list) or as JSON text.
"""
import json
import logging
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
DEFAULT_CURRENT_PAGE = 1

_SORT_DIRECTIONS = ("asc", "desc")


def _decode(raw: Any) -> Any:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed JSON query parameter: %r", raw)
            return None
    return raw


def sanitize_filters(raw: Any, allowed_fields: Iterable[str]) -> dict[str, str]:
    """Keep only whitelisted, non-empty filters.

    Scalar values are matched as text; nested values (lists, objects) are
    dropped.
    """
    filters = _decode(raw)
    if not isinstance(filters, dict):
        return {}
    allowed = set(allowed_fields)
    return {
        key: str(value)
        for key, value in filters.items()
        if key in allowed
        and value is not None
        and value != ""
        and not isinstance(value, (dict, list, tuple, set))
    }


def sanitize_sort(raw: Any, allowed_fields: Iterable[str]) -> list[str]:
    """Return ``[field, direction]`` for a whitelisted field, else ``[]``."""
    sort = _decode(raw)
    if not isinstance(sort, (list, tuple)) or not sort:
        return []

    field = sort[0]
    if not isinstance(field, str) or field not in tuple(allowed_fields):
        return []

    direction = str(sort[1]).lower() if len(sort) > 1 and sort[1] else "asc"
    if direction not in _SORT_DIRECTIONS:
        return []
    return [field, direction]


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def sanitize_pagination(raw: Optional[Any]) -> tuple[int, int]:
    """Return ``(per_page, current_page)`` with defaults and bounds applied."""
    pagination = _decode(raw)
    if not isinstance(pagination, dict):
        return DEFAULT_PER_PAGE, DEFAULT_CURRENT_PAGE

    per_page = min(_positive_int(pagination.get("perPage"), DEFAULT_PER_PAGE), MAX_PER_PAGE)
    current_page = _positive_int(pagination.get("currentPage"), DEFAULT_CURRENT_PAGE)
    return per_page, current_page
