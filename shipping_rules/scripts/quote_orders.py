"""
Quote Orders
============

Quotes a batch of orders against a reference snapshot and writes the
results to CSV.

Usage:
    python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv
    python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv --output quotes.csv
    python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv --reference-dir snapshot/
    python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv --dry-run
"""

import argparse
import sys
from pathlib import Path

import polars as pl

from shipping_rules.batch import quote_orders
from shipping_rules.data.loaders import REFERENCE_DIR, load_context
from shipping_rules.version import VERSION


# =============================================================================
# PIPELINE
# =============================================================================

def run_pipeline(orders_path: Path, items_path: Path, reference_dir: Path) -> pl.DataFrame:
    """Load snapshot and inputs, quote every order."""
    print(f"Step 1: Loading reference snapshot from {reference_dir}...")
    context = load_context(reference_dir)
    for table, rows in context.summary().items():
        print(f"  {table:<16} {rows:>6,} rows")

    print(f"\nStep 2: Loading orders from {orders_path} and items from {items_path}...")
    orders = pl.read_csv(orders_path, infer_schema_length=None)
    items = pl.read_csv(items_path, infer_schema_length=None)
    print(f"  Loaded {len(orders):,} orders, {len(items):,} cart lines")

    print("\nStep 3: Quoting...")
    return quote_orders(orders, items, context)


def print_summary(df: pl.DataFrame) -> None:
    """Print quote totals and error breakdown."""
    print("\n" + "=" * 60)
    print("QUOTE SUMMARY")
    print("=" * 60)
    print(f"Calculator version: {VERSION}")
    print(f"Orders quoted: {len(df):,}")

    if len(df) == 0:
        return

    ok = df.filter(pl.col("shipping_error").is_null())
    print(f"Quoted without error: {len(ok):,}")
    print(f"Free shipping: {ok['is_free_shipping'].sum():,}")
    if len(ok) > 0:
        print(f"Total shipping: {ok['shipping_price'].sum() / 100:,.2f}")
        print(f"Avg per order: {ok['shipping_price'].mean() / 100:,.2f}")

    errors = (
        df.filter(pl.col("shipping_error").is_not_null())
        .group_by("shipping_error")
        .len()
        .sort("shipping_error")
    )
    for row in errors.iter_rows(named=True):
        print(f"  {row['shipping_error']}: {row['len']:,}")


# =============================================================================
# MAIN
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Quote shipping for a batch of orders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input files:
  --orders   order_id, country_code, method_id
             [insurance, signature, gift_wrap, shipment_preference]
  --items    order_id, product_id, quantity, unit_price
             [made_to_order, lead_time_days, size_class_code]

Examples:
  python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv
  python -m shipping_rules.scripts.quote_orders --orders orders.csv --items items.csv --dry-run
        """
    )
    parser.add_argument("--orders", type=Path, required=True, help="Orders CSV")
    parser.add_argument("--items", type=Path, required=True, help="Cart lines CSV")
    parser.add_argument(
        "--reference-dir",
        type=Path,
        default=REFERENCE_DIR,
        help="Directory with one CSV per reference table (default: bundled snapshot)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("quotes.csv"),
        help="Output CSV (default: quotes.csv)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Quote and summarise, don't write output"
    )

    args = parser.parse_args()

    try:
        df = run_pipeline(args.orders, args.items, args.reference_dir)
        print_summary(df)

        print("\n" + "=" * 60)
        if args.dry_run:
            print(f"[DRY RUN] Would have written {len(df):,} rows to {args.output}")
        else:
            df.write_csv(args.output)
            print(f"Wrote {len(df):,} rows to {args.output}")
        print("=" * 60)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
