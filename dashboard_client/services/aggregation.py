"""
Aggregations over normalized payments.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List

from dashboard_client.domain.records import AdminPayment, PaymentGroup

UNKNOWN_PAYER = "Unknown User"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def total_revenue(payments: Iterable[AdminPayment], status: str = "succeeded") -> float:
    """Sum the amounts of payments with the given status."""
    return sum(p.amount for p in payments if p.status == status)


def group_payments_by_user(payments: Iterable[AdminPayment]) -> List[PaymentGroup]:
    """
    Group payments by payer email.

    Payments without a payer email share the "Unknown User" group. Groups
    are ordered by total amount, largest first; payments inside a group
    newest first. Python's sort is stable, so ties keep their fetch order.
    """
    groups: Dict[str, PaymentGroup] = {}
    for payment in payments:
        email = payment.user.email or UNKNOWN_PAYER
        group = groups.get(email)
        if group is None:
            group = PaymentGroup(
                user_email=email,
                user_name=payment.user.name or email,
                payments=[],
                total_amount=0.0,
            )
            groups[email] = group
        group.payments.append(payment)
        group.total_amount += payment.amount

    for group in groups.values():
        group.payments.sort(key=lambda p: p.created_at or _EPOCH, reverse=True)

    return sorted(groups.values(), key=lambda g: g.total_amount, reverse=True)
