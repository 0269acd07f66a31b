"""
Option Pricer

Prices the add-ons (insurance, signature, gift wrap) selected at checkout.

SPECIFICITY CASCADE
-------------------
For each option the most specific active price row wins:
    1. zone and method both match
    2. zone matches, method null
    3. zone and method both null (global default)
Rows scoped to a method but not a zone never apply. Within one level the
lowest row id wins.

An option the method cannot carry is skipped without error. An option
with no price row at any level costs 0.
"""

import polars as pl

from ..models import Method, SelectedOptions


def _specificity(zone_id: str, method_id: str) -> pl.Expr:
    """0 = zone+method, 1 = zone only, 2 = global, null = not applicable."""
    return (
        pl.when((pl.col("zone_id") == zone_id) & (pl.col("method_id") == method_id))
        .then(pl.lit(0))
        .when((pl.col("zone_id") == zone_id) & pl.col("method_id").is_null())
        .then(pl.lit(1))
        .when(pl.col("zone_id").is_null() & pl.col("method_id").is_null())
        .then(pl.lit(2))
        .otherwise(pl.lit(None))
        .alias("_specificity")
    )


def find_option_id(code: str, options: pl.DataFrame) -> str | None:
    """Id of the active option row with this code."""
    rows = options.filter(pl.col("active") & (pl.col("code") == code)).sort("id")
    if rows.is_empty():
        return None
    return rows["id"][0]


def resolve_option_price(
    option_id: str,
    zone_id: str,
    method_id: str,
    option_prices: pl.DataFrame,
) -> int | None:
    """Price of one option through the specificity cascade, None if unpriced."""
    candidates = (
        option_prices
        .filter(pl.col("active") & (pl.col("option_id") == option_id))
        .with_columns(_specificity(zone_id, method_id))
        .filter(pl.col("_specificity").is_not_null())
        .sort(["_specificity", "id"])
    )
    if candidates.is_empty():
        return None
    return int(candidates["price"][0])


def price_options(
    selected: SelectedOptions,
    method: Method,
    zone_id: str,
    options: pl.DataFrame,
    option_prices: pl.DataFrame,
) -> dict[str, int]:
    """
    Price of each selected option the method supports.

    Returns:
        {option_code: price}, only for selected and supported options
    """
    prices = {}
    for code in selected.selected():
        if not method.supports(code):
            continue

        option_id = find_option_id(code, options)
        if option_id is None:
            prices[code] = 0
            continue

        price = resolve_option_price(option_id, zone_id, method.id, option_prices)
        prices[code] = price if price is not None else 0

    return prices


def calc_options_price(
    selected: SelectedOptions,
    method: Method,
    zone_id: str,
    options: pl.DataFrame,
    option_prices: pl.DataFrame,
) -> int:
    """Total add-on price for the order."""
    return sum(price_options(selected, method, zone_id, options, option_prices).values())


__all__ = [
    "calc_options_price",
    "price_options",
    "resolve_option_price",
    "find_option_id",
]
