"""
Shipping Data Loaders

Snapshot loaders. The engine never calls these; callers load a context
once per refresh cycle and pass it in.
"""

from .reference_csv import (
    REFERENCE_DIR,
    load_context,
    load_free_thresholds,
    load_methods,
    load_option_prices,
    load_options,
    load_rate_rules,
    load_size_classes,
    load_zone_countries,
    load_zones,
    read_table,
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
