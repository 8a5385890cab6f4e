"""
Unit tests for payment aggregation.
"""

from datetime import datetime, timezone

from dashboard_client.domain.records import AdminPayment, PaymentPayer
from dashboard_client.services.aggregation import UNKNOWN_PAYER, group_payments_by_user, total_revenue


def payment(pid, amount, email=None, name=None, day=None, status="succeeded"):
    return AdminPayment(
        id=pid,
        amount=amount,
        status=status,
        created_at=datetime(2025, 1, day, tzinfo=timezone.utc) if day else None,
        user=PaymentPayer(email=email, name=name),
    )


def test_total_revenue_counts_succeeded_only():
    payments = [payment("p1", 10), payment("p2", 5, status="failed"), payment("p3", 2.5)]

    assert total_revenue(payments) == 12.5
    assert total_revenue(payments, status="failed") == 5


def test_groups_sorted_by_total():
    groups = group_payments_by_user([
        payment("a1", 10, "a@example.com"),
        payment("b1", 30, "b@example.com"),
        payment("a2", 15, "a@example.com"),
    ])

    assert [(g.user_email, g.total_amount, g.payment_count) for g in groups] == [
        ("b@example.com", 30, 1),
        ("a@example.com", 25, 2),
    ]


def test_payments_inside_group_newest_first():
    groups = group_payments_by_user([
        payment("old", 1, "a@example.com", day=1),
        payment("undated", 1, "a@example.com"),
        payment("new", 1, "a@example.com", day=9),
    ])

    assert [p.id for p in groups[0].payments] == ["new", "old", "undated"]


def test_missing_email_goes_to_unknown_group():
    groups = group_payments_by_user([payment("x", 5), payment("y", 1, "a@example.com", name="Ann")])

    assert groups[0].user_email == UNKNOWN_PAYER
    assert groups[0].user_name == UNKNOWN_PAYER
    assert groups[1].user_name == "Ann"


def test_name_falls_back_to_email():
    groups = group_payments_by_user([payment("x", 5, "a@example.com")])

    assert groups[0].user_name == "a@example.com"


def test_ties_keep_fetch_order():
    groups = group_payments_by_user([payment("b", 5, "b@example.com"), payment("a", 5, "a@example.com")])

    assert [g.user_email for g in groups] == ["b@example.com", "a@example.com"]


def test_empty():
    assert group_payments_by_user([]) == []
