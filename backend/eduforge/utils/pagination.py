import math
from typing import Any, Tuple

from sqlalchemy.orm import Query

MAX_PAGE_SIZE = 100


def page_window(page: int, limit: int) -> Tuple[int, int, int]:
    """Clamp page/limit and return ``(page, limit, offset)``."""
    page = max(int(page or 1), 1)
    limit = max(1, min(int(limit or 10), MAX_PAGE_SIZE))
    return page, limit, (page - 1) * limit


def paginate(query: Query, page: int, limit: int) -> Tuple[list, dict]:
    """Run an offset-paginated query; returns ``(rows, pagination)``."""
    page, limit, offset = page_window(page, limit)
    total = query.order_by(None).count()
    rows = query.offset(offset).limit(limit).all()
    return rows, pagination_meta(page, limit, total)


def pagination_meta(page: int, limit: int, total: int) -> dict[str, Any]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
