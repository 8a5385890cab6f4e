"""
Pagination shapes shared by both backends.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Pagination:
    """Page metadata reported by every list operation."""
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def empty(cls, page: int = 1, limit: int = 0) -> "Pagination":
        return cls(page=page, limit=limit, total=0, pages=0)

    @classmethod
    def for_total(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, pages=pages)

    @classmethod
    def from_raw(
        cls,
        data: Optional[Dict[str, Any]],
        page: int,
        limit: int,
        fallback_total: int,
    ) -> "Pagination":
        """
        Read server-reported pagination, filling gaps from the request.

        Args:
            data: ``pagination`` object from the REST response (may be None)
            page: Requested page
            limit: Requested page size
            fallback_total: Total to report when the server sent none
        """
        if not data:
            return cls.for_total(page, limit, fallback_total)

        total = int(data.get("total", fallback_total) or 0)
        limit = int(data.get("limit", limit) or limit)
        pages = data.get("pages")
        if pages is None:
            pages = data.get("totalPages")
        if pages is None:
            return cls.for_total(int(data.get("page", page) or page), limit, total)
        return cls(page=int(data.get("page", page) or page), limit=limit, total=total, pages=int(pages))

    def to_dict(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass
class RecordPage:
    """One page of raw backend records plus its pagination."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination.empty)


def slice_window(records: List[Dict[str, Any]], page: int, limit: int) -> RecordPage:
    """
    Cut one page out of a window that was fetched in full.

    Used by the direct-store backend, which reads a bounded window ordered
    server-side and pages through it locally. Pages past the end are empty
    but still report the window total.
    """
    start = (page - 1) * limit
    return RecordPage(
        records=records[start:start + limit],
        pagination=Pagination.for_total(page, limit, len(records)),
    )
