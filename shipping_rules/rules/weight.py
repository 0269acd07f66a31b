"""
Weight Aggregator

Converts cart lines to weight points: an abstract bulkiness unit taken
from each product's size class, not physical weight.
"""

from collections.abc import Sequence

import polars as pl

from ..data.reference.defaults import DEFAULT_WEIGHT_POINTS
from ..models import CartLineItem


def calc_weight_points(items: Sequence[CartLineItem], size_classes: pl.DataFrame) -> int:
    """
    Total weight points of a group of cart lines.

    Each line counts quantity * weight_points of its size class. Lines
    without a size class, or naming an unknown or inactive one, count as
    MEDIUM (DEFAULT_WEIGHT_POINTS).
    """
    if not items:
        return 0

    lines = pl.DataFrame(
        {
            "quantity": [item.quantity for item in items],
            "size_class_code": [item.size_class_code for item in items],
        },
        schema={"quantity": pl.Int64, "size_class_code": pl.Utf8},
    )
    classes = (
        size_classes
        .filter(pl.col("active"))
        .select(["code", "weight_points"])
    )

    return int(
        lines
        .join(classes, left_on="size_class_code", right_on="code", how="left")
        .select(
            (pl.col("quantity") * pl.col("weight_points").fill_null(DEFAULT_WEIGHT_POINTS)).sum()
        )
        .item()
    )


__all__ = ["calc_weight_points"]
