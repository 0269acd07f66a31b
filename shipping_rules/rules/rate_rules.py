"""
Rate Rule Matcher

Finds the priced rule for a (zone, method, subtotal, weight points) tuple.

MATCHING
--------
A rule matches when zone_id and method_id are equal, the rule is active,
and both subtotal and weight points fall inside its bounds. Bounds are
inclusive on both ends; a null max is unbounded.

PRECEDENCE
----------
Lowest priority value wins. Equal priorities are broken by rule id
ascending, so the outcome never depends on table row order.
"""

import polars as pl

from ..models import RateRule


def rule_matches(zone_id: str, method_id: str, subtotal: int, weight_points: int) -> pl.Expr:
    """Polars expression selecting the rate rules that apply."""
    return (
        (pl.col("zone_id") == zone_id) &
        (pl.col("method_id") == method_id) &
        pl.col("active") &
        (pl.col("min_subtotal") <= subtotal) &
        (pl.col("max_subtotal").is_null() | (pl.col("max_subtotal") >= subtotal)) &
        (pl.col("min_weight_points") <= weight_points) &
        (pl.col("max_weight_points").is_null() | (pl.col("max_weight_points") >= weight_points))
    )


def matching_rules(
    zone_id: str,
    method_id: str,
    subtotal: int,
    weight_points: int,
    rate_rules: pl.DataFrame,
) -> pl.DataFrame:
    """All applicable rules, best first."""
    return (
        rate_rules
        .filter(rule_matches(zone_id, method_id, subtotal, weight_points))
        .sort(["priority", "id"])
    )


def find_best_rule(
    zone_id: str,
    method_id: str,
    subtotal: int,
    weight_points: int,
    rate_rules: pl.DataFrame,
) -> RateRule | None:
    """
    Best-matching rate rule, or None if no rule applies.

    Args:
        zone_id: Resolved zone
        method_id: Requested method
        subtotal: Sum of unit_price * quantity over the evaluated group
        weight_points: Weight points of the same group
        rate_rules: Rate rule table

    Returns:
        Winning RateRule, or None
    """
    matches = matching_rules(zone_id, method_id, subtotal, weight_points, rate_rules)
    if matches.is_empty():
        return None
    return RateRule.from_row(matches.row(0, named=True))


__all__ = ["find_best_rule", "matching_rules", "rule_matches"]
