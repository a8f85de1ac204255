from math import ceil
from typing import Any, Dict


def paginate(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Pagination metadata for a listing page; pages are 1-based.
    """
    total_pages = ceil(total / limit) if limit > 0 else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
    }
