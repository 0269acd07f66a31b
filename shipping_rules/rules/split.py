"""
Split Planner

Ships ready-stock items now and made-to-order items once produced, as two
legs priced independently.

PARTITION
---------
    ready          - not made to order, or no positive lead time
    made_to_order  - made to order with a positive lead time

Each non-empty leg gets its own subtotal, weight points, free-shipping
check and rate rule. An empty leg costs 0. A leg with no applicable rule
costs 0 and carries error NO_RATE_RULE; the order as a whole is not
failed. Add-on options are priced once per order by the caller, never
per leg.
"""

from collections.abc import Sequence

from ..context import ShippingContext
from ..models import NO_RATE_RULE, CartLineItem, Method, ShipmentLeg, SplitDetails, Zone
from .cart import calc_lead_time
from .group import quote_group


def partition_items(
    items: Sequence[CartLineItem],
) -> tuple[list[CartLineItem], list[CartLineItem]]:
    """Split cart lines into (ready, made_to_order)."""
    ready = [item for item in items if not item.waits_for_production]
    made_to_order = [item for item in items if item.waits_for_production]
    return ready, made_to_order


def plan_leg(
    items: Sequence[CartLineItem],
    zone: Zone,
    method: Method,
    context: ShippingContext,
    force_free: bool = False,
) -> ShipmentLeg:
    """Price and timing of one leg."""
    eta_min, eta_max = method.eta_window
    lead_time = calc_lead_time(items)

    if not items:
        return ShipmentLeg(
            shipping_price=0,
            eta_min_days=eta_min,
            eta_max_days=eta_max,
            lead_time_days=lead_time,
        )

    quote = quote_group(items, zone.id, method.id, context, force_free=force_free)
    return ShipmentLeg(
        shipping_price=quote.price,
        eta_min_days=eta_min,
        eta_max_days=eta_max,
        lead_time_days=lead_time,
        is_free_shipping=quote.is_free_shipping,
        subtotal=quote.subtotal,
        weight_points=quote.weight_points,
        item_count=len(items),
        error=NO_RATE_RULE if quote.missing_rule else None,
    )


def plan_split(
    items: Sequence[CartLineItem],
    zone: Zone,
    method: Method,
    context: ShippingContext,
    order_free: bool = False,
) -> SplitDetails:
    """
    Plan both legs of a split shipment.

    Args:
        items: Whole cart
        zone: Resolved zone
        method: Resolved method
        context: Reference snapshot
        order_free: The whole cart already reached a free-shipping
            threshold; both legs ship free

    Returns:
        SplitDetails with ready_shipment and made_to_order_shipment
    """
    ready, made_to_order = partition_items(items)
    return SplitDetails(
        ready_shipment=plan_leg(ready, zone, method, context, force_free=order_free),
        made_to_order_shipment=plan_leg(made_to_order, zone, method, context, force_free=order_free),
    )


__all__ = ["partition_items", "plan_leg", "plan_split"]
