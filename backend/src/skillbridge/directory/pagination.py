"""Pagination helpers shared by every listing endpoint."""

import math
from typing import Any, Dict, Optional, Sequence

from ..config import get_settings


def normalize_page(page: Optional[int]) -> int:
    """Pages are 1-indexed; anything below 1 or missing becomes 1."""
    if page is None or page < 1:
        return 1
    return page


def normalize_per_page(per_page: Optional[int]) -> int:
    """Apply the configured default and upper bound to a page size."""
    settings = get_settings()
    if per_page is None or per_page < 1:
        return settings.DEFAULT_PAGE_SIZE
    return min(per_page, settings.MAX_PAGE_SIZE)


def page_offset(page: int, per_page: int) -> int:
    return (page - 1) * per_page


def paginate(items: Sequence[Any], total: int, page: int, per_page: int) -> Dict[str, Any]:
    """Wrap one page of items with navigation metadata.

    ``pages`` is never below 1, so an empty listing reports page 1 of 1.

    Example:
        >>> paginate(["a", "b"], total=5, page=1, per_page=2)["pages"]
        3
    """
    pages = max(1, math.ceil(total / per_page)) if per_page > 0 else 1
    return {
        "items": list(items),
        "page": page,
        "per_page": per_page,
        "total": total,
        "pages": pages,
        "has_prev": page > 1,
        "has_next": page < pages,
    }
