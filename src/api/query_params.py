"""Query-string serialization for the records API."""

from typing import Any, List, Optional, Tuple

QueryParams = List[Tuple[str, str]]


def _wire_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def filter_params(filters: Any) -> QueryParams:
    """Serialize filters as repeated ``key=value`` pairs.

    List values repeat the key once per member; absent or ``None`` values
    are omitted entirely.

    Args:
        filters: Anything with ``items()`` yielding (key, value) pairs,
            typically a ``FilterState``

    Returns:
        Ordered (key, value) pairs ready for ``aiohttp`` ``params=``
    """
    params: QueryParams = []
    if not filters:
        return params
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            params.extend((key, _wire_value(v)) for v in value if v is not None)
        else:
            params.append((key, _wire_value(value)))
    return params


def shortlist_params(filters: Any, sort: Optional[str], page: int, page_size: int) -> QueryParams:
    """Filter params plus ``sort``, ``page`` and ``page_size`` for ``/shortlist``."""
    params = filter_params(filters)
    if sort:
        params.append(("sort", sort))
    params.append(("page", str(page)))
    params.append(("page_size", str(page_size)))
    return params
