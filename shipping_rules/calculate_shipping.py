"""
Shipping Calculator

Request in, result out. Given a cart, a destination country, a method,
selected add-ons and a fulfillment preference, computes shipping price,
free-shipping eligibility, customs notice, delivery window and lead time
against a ShippingContext snapshot.

PIPELINE
--------
    1. Resolve zone               - NO_ZONE if the country has no active zone
    2. Resolve method             - NO_METHOD if unknown or inactive
    3. Lead time                  - longest made-to-order lead time
    4. Order-wide free shipping   - subtotal against free thresholds
    5. Base price
         single: best rate rule   - NO_RATE_RULE if none and not free
         split:  two legs priced independently (rules/split.py)
    6. Add-on options             - priced once per order
    7. Compose result

Errors are returned on the result, never raised. A failed result has
shipping_price 0 and keeps whatever was resolved before the failure.

The calculation is pure: no I/O, no shared state. One context may serve
any number of concurrent calls.

USAGE
-----
    from shipping_rules.calculate_shipping import calculate_shipping
    result = calculate_shipping(request, context)
"""

import polars as pl

from .context import ShippingContext
from .data.reference.defaults import SPLIT
from .models import (
    NO_METHOD,
    NO_RATE_RULE,
    NO_ZONE,
    Method,
    ShippingCalcRequest,
    ShippingCalcResult,
    Zone,
)
from .rules import (
    calc_lead_time,
    calc_options_price,
    calc_subtotal,
    is_free_shipping,
    plan_split,
    quote_group,
    resolve_zone,
)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def calculate_shipping(request: ShippingCalcRequest, context: ShippingContext) -> ShippingCalcResult:
    """
    Calculate shipping for one checkout.

    Args:
        request: Cart, destination, method, options, shipment preference
        context: Reference snapshot

    Returns:
        ShippingCalcResult; result.error is set on NO_ZONE, NO_METHOD or
        (single mode only) NO_RATE_RULE
    """
    # Phase 1: Zone
    zone = resolve_zone(request.country_code, context.zones, context.zone_countries)
    if zone is None:
        return _failed(NO_ZONE)

    # Phase 2: Method
    method = resolve_method(request.method_id, context.methods)
    if method is None:
        return _failed(NO_METHOD, zone=zone)

    # Phase 3: Lead time across the whole cart
    lead_time = calc_lead_time(request.items)

    # Phase 4: Order-wide free shipping
    order_free = is_free_shipping(
        zone.id, method.id, calc_subtotal(request.items), context.free_thresholds
    )

    # Phase 5: Base price
    if request.shipment_preference == SPLIT:
        return _calculate_split(request, context, zone, method, lead_time, order_free)

    quote = quote_group(request.items, zone.id, method.id, context, force_free=order_free)
    if quote.missing_rule:
        return _failed(NO_RATE_RULE, zone=zone, method=method, lead_time=lead_time)

    # Phase 6: Options
    options_price = calc_options_price(
        request.options, method, zone.id, context.options, context.option_prices
    )

    # Phase 7: Compose
    eta_min, eta_max = method.eta_window
    return ShippingCalcResult(
        shipping_price=quote.price + options_price,
        zone=zone,
        method=method,
        is_free_shipping=quote.is_free_shipping,
        options_price=options_price,
        customs_notice=zone.customs_notice,
        eta_min_days=eta_min,
        eta_max_days=eta_max,
        lead_time_days=lead_time,
    )


def _calculate_split(
    request: ShippingCalcRequest,
    context: ShippingContext,
    zone: Zone,
    method: Method,
    lead_time: int,
    order_free: bool,
) -> ShippingCalcResult:
    """
    Split mode: ready and made-to-order legs priced independently.

    A leg without a rate rule costs 0 and carries its own error; the order
    itself does not fail. The order is free only when the whole cart reached
    a threshold: a leg's subtotal never exceeds the cart's.
    """
    details = plan_split(request.items, zone, method, context, order_free=order_free)
    options_price = calc_options_price(
        request.options, method, zone.id, context.options, context.option_prices
    )

    eta_min, eta_max = method.eta_window
    return ShippingCalcResult(
        shipping_price=(
            details.ready_shipment.shipping_price +
            details.made_to_order_shipment.shipping_price +
            options_price
        ),
        zone=zone,
        method=method,
        is_free_shipping=order_free,
        options_price=options_price,
        customs_notice=zone.customs_notice,
        eta_min_days=eta_min,
        eta_max_days=eta_max,
        lead_time_days=lead_time,
        split_details=details,
    )


def _failed(
    error: str,
    zone: Zone | None = None,
    method: Method | None = None,
    lead_time: int = 0,
) -> ShippingCalcResult:
    """Zero-priced result carrying the error and whatever was resolved."""
    eta_min, eta_max = method.eta_window if method is not None else (0, 0)
    return ShippingCalcResult(
        shipping_price=0,
        zone=zone,
        method=method,
        is_free_shipping=False,
        options_price=0,
        customs_notice=zone.customs_notice if zone is not None else False,
        eta_min_days=eta_min,
        eta_max_days=eta_max,
        lead_time_days=lead_time,
        error=error,
    )


# =============================================================================
# METHODS
# =============================================================================

def resolve_method(method_id: str, methods: pl.DataFrame) -> Method | None:
    """The active method with this id, or None."""
    rows = methods.filter((pl.col("id") == method_id) & pl.col("active"))
    if rows.is_empty():
        return None
    return Method.from_row(rows.row(0, named=True))


def active_methods(methods: pl.DataFrame) -> list[Method]:
    """Active methods in display order (sort_order, then id)."""
    return [
        Method.from_row(row)
        for row in methods.filter(pl.col("active")).sort(["sort_order", "id"]).iter_rows(named=True)
    ]


def quote_methods(
    request: ShippingCalcRequest,
    context: ShippingContext,
) -> list[tuple[Method, ShippingCalcResult]]:
    """
    Evaluate the request against every active method.

    request.method_id is ignored. Methods come back in display order,
    including those whose result carries an error, so a method picker can
    show them as unavailable.
    """
    results = []
    for method in active_methods(context.methods):
        candidate = ShippingCalcRequest(
            items=request.items,
            country_code=request.country_code,
            method_id=method.id,
            options=request.options,
            shipment_preference=request.shipment_preference,
        )
        results.append((method, calculate_shipping(candidate, context)))
    return results


__all__ = [
    "calculate_shipping",
    "quote_methods",
    "resolve_method",
    "active_methods",
]
