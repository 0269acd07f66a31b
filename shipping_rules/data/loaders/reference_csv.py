"""
Reference CSV Loader

Reads a reference snapshot, one CSV per table, and assembles a validated
ShippingContext.

Each CSV carries the columns of its table in context.TABLE_SCHEMAS; optional
columns may be left out. Empty cells are nulls.
"""

from pathlib import Path

import polars as pl

from ...context import TABLE_SCHEMAS, ShippingContext, normalise_table


REFERENCE_DIR = Path(__file__).parent.parent / "reference"


def read_table(name: str, reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    """
    Read one reference table from <reference_dir>/<name>.csv.

    Returns:
        DataFrame normalised to the table schema

    Raises:
        FileNotFoundError: If the CSV does not exist
        ValueError: If required columns are missing
    """
    if name not in TABLE_SCHEMAS:
        raise ValueError(f"Unknown reference table: {name}")

    path = Path(reference_dir) / f"{name}.csv"
    raw = pl.read_csv(path, infer_schema_length=None)
    return normalise_table(name, raw)


def load_zones(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    """Zones: id, names, customs_notice, active, sort_order."""
    return read_table("zones", reference_dir)


def load_zone_countries(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    """Country to zone mapping, country codes upper-cased."""
    return read_table("zone_countries", reference_dir)


def load_size_classes(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    return read_table("size_classes", reference_dir)


def load_methods(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    return read_table("methods", reference_dir)


def load_options(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    return read_table("options", reference_dir)


def load_rate_rules(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    """
    Rate rules.

    Returns:
        DataFrame with columns:
            - zone_id, method_id: What the rule prices
            - min_subtotal, max_subtotal: Inclusive subtotal bounds (max null = unbounded)
            - min_weight_points, max_weight_points: Inclusive weight bounds
            - price: Base shipping price (minor units)
            - priority: Lower wins
    """
    return read_table("rate_rules", reference_dir)


def load_free_thresholds(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    return read_table("free_thresholds", reference_dir)


def load_option_prices(reference_dir: Path | str = REFERENCE_DIR) -> pl.DataFrame:
    return read_table("option_prices", reference_dir)


def load_context(reference_dir: Path | str = REFERENCE_DIR) -> ShippingContext:
    """
    Load all eight reference tables and assemble a validated context.

    Args:
        reference_dir: Directory holding one CSV per table (bundled sample
            snapshot if not provided)

    Raises:
        ValueError: If the snapshot fails validation
    """
    return ShippingContext.from_frames(
        **{name: read_table(name, reference_dir) for name in TABLE_SCHEMAS}
    )


__all__ = [
    "load_context",
    "read_table",
    "load_zones",
    "load_zone_countries",
    "load_size_classes",
    "load_methods",
    "load_options",
    "load_rate_rules",
    "load_free_thresholds",
    "load_option_prices",
    "REFERENCE_DIR",
]
