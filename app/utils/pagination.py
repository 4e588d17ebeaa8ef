# app/utils/pagination.py

from typing import Literal, Optional
from pymongo import ASCENDING, DESCENDING

SortOrder = Literal["asc", "desc"]

def build_pagination(page: int, page_size: int) -> tuple[int, int]:
    """(skip, limit) for a 1-based page number."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")
    return (page - 1) * page_size, page_size

def build_sort(sort_by: str, sort_order: SortOrder = "asc", tiebreak: Optional[str] = "_id"):
    direction = ASCENDING if sort_order == "asc" else DESCENDING
    keys = [(sort_by, direction)]
    # Equal sort keys come back in insertion order
    if tiebreak and tiebreak != sort_by:
        keys.append((tiebreak, ASCENDING))
    return keys
