"""
Group Quoting

Prices one group of cart lines: the whole cart in single mode, or one leg
of a split shipment.

Order of evaluation:
    1. subtotal and weight points
    2. free-shipping threshold   - when reached, no rate rule is looked up
    3. best rate rule            - None when nothing matches
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..context import ShippingContext
from ..models import CartLineItem, RateRule
from .cart import calc_subtotal
from .free_shipping import is_free_shipping
from .rate_rules import find_best_rule
from .weight import calc_weight_points


@dataclass(frozen=True)
class GroupQuote:
    subtotal: int
    weight_points: int
    is_free_shipping: bool
    rule: RateRule | None
    price: int

    @property
    def missing_rule(self) -> bool:
        """Not free and no rate rule applies."""
        return not self.is_free_shipping and self.rule is None


def quote_group(
    items: Sequence[CartLineItem],
    zone_id: str,
    method_id: str,
    context: ShippingContext,
    force_free: bool = False,
) -> GroupQuote:
    """
    Base shipping price of a group of cart lines.

    Args:
        items: Lines in the group
        zone_id: Resolved zone
        method_id: Resolved method
        context: Reference snapshot
        force_free: Treat the group as free (an order-wide threshold was
            already reached), skipping both lookups

    Returns:
        GroupQuote; price is 0 when free or when no rule matches
    """
    subtotal = calc_subtotal(items)
    weight_points = calc_weight_points(items, context.size_classes)

    if force_free or is_free_shipping(zone_id, method_id, subtotal, context.free_thresholds):
        return GroupQuote(subtotal, weight_points, True, None, 0)

    rule = find_best_rule(zone_id, method_id, subtotal, weight_points, context.rate_rules)
    price = rule.price if rule is not None else 0
    return GroupQuote(subtotal, weight_points, False, rule, price)


__all__ = ["GroupQuote", "quote_group"]
