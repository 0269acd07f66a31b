"""
Shipping Rules Engine

Pure shipping-cost calculation over a reference snapshot.

    from shipping_rules import calculate_shipping, load_context
    context = load_context()
    result = calculate_shipping(request, context)
"""

from .batch import quote_orders
from .calculate_shipping import calculate_shipping, quote_methods
from .context import ShippingContext, validate_context
from .data.loaders import load_context
from .dates import estimate_dates
from .models import (
    ERROR_CODES,
    NO_METHOD,
    NO_RATE_RULE,
    NO_ZONE,
    CartLineItem,
    EstimatedDates,
    Method,
    RateRule,
    SelectedOptions,
    ShipmentLeg,
    ShippingCalcRequest,
    ShippingCalcResult,
    SplitDetails,
    Zone,
)
from .version import VERSION

__all__ = [
    "calculate_shipping",
    "quote_methods",
    "quote_orders",
    "estimate_dates",
    "load_context",
    "ShippingContext",
    "validate_context",
    "CartLineItem",
    "SelectedOptions",
    "ShippingCalcRequest",
    "ShippingCalcResult",
    "ShipmentLeg",
    "SplitDetails",
    "EstimatedDates",
    "Zone",
    "Method",
    "RateRule",
    "NO_ZONE",
    "NO_METHOD",
    "NO_RATE_RULE",
    "ERROR_CODES",
    "VERSION",
]
