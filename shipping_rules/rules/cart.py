"""
Cart Totals

Subtotal and production lead time over a group of cart lines.
"""

from collections.abc import Sequence

from ..models import CartLineItem


def calc_subtotal(items: Sequence[CartLineItem]) -> int:
    """Sum of unit_price * quantity."""
    return sum(item.line_total for item in items)


def calc_lead_time(items: Sequence[CartLineItem]) -> int:
    """
    Longest production lead time among made-to-order lines.

    Lead times are not added up: made-to-order items are produced in
    parallel. 0 when no line waits for production.
    """
    return max(
        (item.lead_time_days for item in items if item.waits_for_production),
        default=0,
    )


__all__ = ["calc_subtotal", "calc_lead_time"]
