import math
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Query

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def normalize(page: int, limit: int) -> Tuple[int, int]:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT
    return page, min(limit, MAX_LIMIT)


def envelope(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def paginate(query: Query, page: int = 1, limit: int = DEFAULT_LIMIT) -> Tuple[List[Any], Dict[str, Any]]:
    """Return one page of `query` plus the pagination envelope."""
    page, limit = normalize(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, envelope(page, limit, total)
