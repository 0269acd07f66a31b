"""
Rule Modules

One module per decision in the pipeline, leaves first:

    zones          - country -> active zone
    weight         - cart lines -> weight points
    cart           - subtotal, lead time
    rate_rules     - best priced rule
    free_shipping  - threshold check
    options        - add-on pricing cascade
    group          - one group priced end to end
    split          - ready / made-to-order legs
"""

from .cart import calc_lead_time, calc_subtotal
from .free_shipping import is_free_shipping, lowest_threshold
from .group import GroupQuote, quote_group
from .options import calc_options_price, price_options, resolve_option_price
from .rate_rules import find_best_rule, matching_rules
from .split import partition_items, plan_split
from .weight import calc_weight_points
from .zones import resolve_zone

__all__ = [
    "resolve_zone",
    "calc_weight_points",
    "calc_subtotal",
    "calc_lead_time",
    "find_best_rule",
    "matching_rules",
    "is_free_shipping",
    "lowest_threshold",
    "calc_options_price",
    "price_options",
    "resolve_option_price",
    "GroupQuote",
    "quote_group",
    "partition_items",
    "plan_split",
]
