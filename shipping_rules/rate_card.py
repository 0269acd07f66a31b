"""
Rate Card

Tabular views of a snapshot's pricing, for review before a snapshot goes
live: which base price a zone/method charges across a range of subtotals,
and the rule table with readable zone and method names.
"""

from collections.abc import Iterable

import polars as pl

from .context import ShippingContext
from .rules import find_best_rule, is_free_shipping, lowest_threshold


def build_rate_card(
    context: ShippingContext,
    zone_id: str,
    method_id: str,
    weight_points: int,
    subtotals: Iterable[int],
) -> pl.DataFrame:
    """
    Base shipping price for each subtotal at a fixed weight.

    Returns:
        DataFrame with columns:
            - subtotal: Cart subtotal (minor units)
            - base_price: Price before options (null when no rule applies)
            - is_free_shipping: Threshold reached
            - rule_id: Winning rate rule (null when free or unmatched)
    """
    rows = []
    for subtotal in subtotals:
        if is_free_shipping(zone_id, method_id, subtotal, context.free_thresholds):
            rows.append((subtotal, 0, True, None))
            continue
        rule = find_best_rule(zone_id, method_id, subtotal, weight_points, context.rate_rules)
        rows.append((
            subtotal,
            rule.price if rule is not None else None,
            False,
            rule.id if rule is not None else None,
        ))

    return pl.DataFrame(
        rows,
        schema={
            "subtotal": pl.Int64,
            "base_price": pl.Int64,
            "is_free_shipping": pl.Boolean,
            "rule_id": pl.Utf8,
        },
        orient="row",
    )


def subtotal_breakpoints(context: ShippingContext, zone_id: str, method_id: str) -> list[int]:
    """
    Subtotals where the price for a zone/method can change.

    Every rule bound (and the value just past each max), plus the lowest
    free-shipping threshold, sorted.
    """
    rules = context.rate_rules.filter(
        (pl.col("zone_id") == zone_id) & (pl.col("method_id") == method_id) & pl.col("active")
    )
    points = {0}
    points.update(rules["min_subtotal"].drop_nulls().to_list())
    points.update(v + 1 for v in rules["max_subtotal"].drop_nulls().to_list())

    threshold = lowest_threshold(zone_id, method_id, context.free_thresholds)
    if threshold is not None:
        points.add(threshold)

    return sorted(points)


def rate_rule_table(context: ShippingContext) -> pl.DataFrame:
    """Rate rules with zone and method names, sorted for review."""
    zones = context.zones.select(
        pl.col("id").alias("zone_id"),
        pl.col("name_en").alias("zone_name"),
    )
    methods = context.methods.select(
        pl.col("id").alias("method_id"),
        pl.col("code").alias("method_code"),
    )
    return (
        context.rate_rules
        .join(zones, on="zone_id", how="left")
        .join(methods, on="method_id", how="left")
        .sort(["zone_id", "method_id", "priority", "id"])
    )


__all__ = ["build_rate_card", "subtotal_breakpoints", "rate_rule_table"]
