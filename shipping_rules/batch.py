"""
Batch Quoting

DataFrame in, DataFrame out. Quotes many orders at once, for backfills and
what-if runs over a new reference snapshot.

REQUIRED INPUT COLUMNS
----------------------
    orders:
        order_id            - Order key
        country_code        - Destination country
        method_id           - Requested method
        insurance, signature, gift_wrap   - optional, default false
        shipment_preference               - optional, default "single"

    items:
        order_id            - Order key
        product_id          - Product
        quantity            - Units
        unit_price          - Minor units
        made_to_order, lead_time_days, size_class_code   - optional

OUTPUT COLUMNS ADDED
--------------------
    zone_id, method_code, shipping_price, options_price, is_free_shipping,
    customs_notice, eta_min_days, eta_max_days, lead_time_days,
    ready_shipping_price, made_to_order_shipping_price, shipping_error,
    calculator_version

USAGE
-----
    from shipping_rules.batch import quote_orders
    result = quote_orders(orders, items, context)
"""

from collections import defaultdict

import polars as pl

from .calculate_shipping import calculate_shipping
from .context import ShippingContext, cast_column
from .data.reference.defaults import SINGLE
from .models import CartLineItem, SelectedOptions, ShippingCalcRequest, ShippingCalcResult
from .version import VERSION


ORDER_COLUMNS = ["order_id", "country_code", "method_id"]
ITEM_COLUMNS = ["order_id", "product_id", "quantity", "unit_price"]

RESULT_SCHEMA = {
    "zone_id": pl.Utf8,
    "method_code": pl.Utf8,
    "shipping_price": pl.Int64,
    "options_price": pl.Int64,
    "is_free_shipping": pl.Boolean,
    "customs_notice": pl.Boolean,
    "eta_min_days": pl.Int64,
    "eta_max_days": pl.Int64,
    "lead_time_days": pl.Int64,
    "ready_shipping_price": pl.Int64,
    "made_to_order_shipping_price": pl.Int64,
    "shipping_error": pl.Utf8,
}

OUTPUT_COLUMNS = list(RESULT_SCHEMA) + ["calculator_version"]

ORDER_FLAG_COLUMNS = ["insurance", "signature", "gift_wrap"]
ITEM_FLAG_COLUMNS = ["made_to_order"]


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def quote_orders(
    orders: pl.DataFrame,
    items: pl.DataFrame,
    context: ShippingContext,
) -> pl.DataFrame:
    """
    Quote every order in a DataFrame.

    Args:
        orders: One row per order (see module docstring)
        items: One row per cart line, keyed by order_id
        context: Reference snapshot

    Returns:
        orders with result columns appended, in input order

    Raises:
        ValueError: If required columns are missing
    """
    _check_columns(orders, ORDER_COLUMNS, "orders")
    _check_columns(items, ITEM_COLUMNS, "items")

    lines = _lines_by_order(_parse_flags(items, ITEM_FLAG_COLUMNS))

    rows = [
        _result_row(calculate_shipping(_build_request(order, lines.get(order["order_id"], [])), context))
        for order in _parse_flags(orders, ORDER_FLAG_COLUMNS).iter_rows(named=True)
    ]
    results = pl.DataFrame(rows, schema=RESULT_SCHEMA, orient="row")

    # Re-quoting a previous output replaces its result columns
    stale = [c for c in OUTPUT_COLUMNS if c in orders.columns]

    return (
        pl.concat([orders.drop(stale), results], how="horizontal")
        .with_columns(pl.lit(VERSION).alias("calculator_version"))
    )


# =============================================================================
# HELPERS
# =============================================================================

def _check_columns(df: pl.DataFrame, required: list[str], name: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{name}: missing required columns {missing}")


def _parse_flags(df: pl.DataFrame, columns: list[str]) -> pl.DataFrame:
    """Read flag columns as booleans ("yes"/"no" text included), null as false."""
    return df.with_columns([
        cast_column(pl.col(c), pl.Boolean, df.schema[c]).fill_null(False).alias(c)
        for c in columns
        if c in df.columns
    ])


def _lines_by_order(items: pl.DataFrame) -> dict:
    """Cart lines grouped by order_id, in input order."""
    lines = defaultdict(list)
    for row in items.iter_rows(named=True):
        lines[row["order_id"]].append(
            CartLineItem(
                product_id=str(row["product_id"]),
                quantity=int(row["quantity"]),
                unit_price=int(row["unit_price"]),
                made_to_order=row.get("made_to_order", False),
                lead_time_days=row.get("lead_time_days"),
                size_class_code=row.get("size_class_code"),
            )
        )
    return lines


def _build_request(order: dict, lines: list[CartLineItem]) -> ShippingCalcRequest:
    return ShippingCalcRequest(
        items=lines,
        country_code=order["country_code"],
        method_id=order["method_id"],
        options=SelectedOptions(
            insurance=order.get("insurance", False),
            signature=order.get("signature", False),
            gift_wrap=order.get("gift_wrap", False),
        ),
        shipment_preference=order.get("shipment_preference") or SINGLE,
    )


def _result_row(result: ShippingCalcResult) -> tuple:
    """Flatten a result into RESULT_SCHEMA column order."""
    split = result.split_details
    return (
        result.zone.id if result.zone is not None else None,
        result.method.code if result.method is not None else None,
        result.shipping_price,
        result.options_price,
        result.is_free_shipping,
        result.customs_notice,
        result.eta_min_days,
        result.eta_max_days,
        result.lead_time_days,
        split.ready_shipment.shipping_price if split is not None else None,
        split.made_to_order_shipment.shipping_price if split is not None else None,
        result.error,
    )


__all__ = ["quote_orders", "RESULT_SCHEMA", "OUTPUT_COLUMNS"]
