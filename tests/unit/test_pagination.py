"""
Unit tests for pagination shapes.
"""

from dashboard_client.domain.pagination import Pagination, slice_window


def test_for_total_rounds_pages_up():
    assert Pagination.for_total(1, 10, 151).pages == 16
    assert Pagination.for_total(1, 10, 0).pages == 0


def test_from_raw_prefers_server_values():
    """Server pagination wins over the request."""
    pagination = Pagination.from_raw({"page": 2, "limit": 20, "total": 45, "pages": 3}, 1, 10, 0)

    assert pagination.to_dict() == {"page": 2, "limit": 20, "total": 45, "pages": 3}


def test_from_raw_accepts_total_pages():
    pagination = Pagination.from_raw({"total": 45, "totalPages": 5}, 1, 10, 0)

    assert pagination.pages == 5
    assert pagination.limit == 10


def test_from_raw_computes_missing_pages():
    assert Pagination.from_raw({"total": 45}, 1, 10, 0).pages == 5


def test_from_raw_without_pagination_uses_records():
    """No pagination object: the returned records are the total."""
    assert Pagination.from_raw(None, 1, 10, 7).to_dict() == {"page": 1, "limit": 10, "total": 7, "pages": 1}


def test_slice_window():
    records = [{"id": str(i)} for i in range(25)]

    page = slice_window(records, 3, 10)

    assert [r["id"] for r in page.records] == [str(i) for i in range(20, 25)]
    assert page.pagination.to_dict() == {"page": 3, "limit": 10, "total": 25, "pages": 3}


def test_slice_window_past_the_end():
    """Pages past the end are empty but keep the total."""
    page = slice_window([{"id": "1"}], 5, 10)

    assert page.records == []
    assert page.pagination.total == 1
