"""
Free-Shipping Evaluator

An order ships free when an active threshold for its zone (scoped to the
requested method, or to every method when method_id is null) is reached.
"""

import polars as pl


def is_free_shipping(
    zone_id: str,
    method_id: str,
    subtotal: int,
    free_thresholds: pl.DataFrame,
) -> bool:
    """True if subtotal reaches any applicable threshold (inclusive)."""
    applicable = free_thresholds.filter(
        pl.col("active") &
        (pl.col("zone_id") == zone_id) &
        (pl.col("method_id").is_null() | (pl.col("method_id") == method_id)) &
        (pl.col("threshold") <= subtotal)
    )
    return not applicable.is_empty()


def lowest_threshold(zone_id: str, method_id: str, free_thresholds: pl.DataFrame) -> int | None:
    """Smallest subtotal that ships free for this zone and method, if any."""
    applicable = free_thresholds.filter(
        pl.col("active") &
        (pl.col("zone_id") == zone_id) &
        (pl.col("method_id").is_null() | (pl.col("method_id") == method_id))
    )
    if applicable.is_empty():
        return None
    return int(applicable["threshold"].min())


__all__ = ["is_free_shipping", "lowest_threshold"]
