"""
Shipping Data

Engine defaults and reference snapshot loading.

Structure:
    - reference/: Engine defaults and a sample snapshot, one CSV per table
    - loaders/: Snapshot loaders (shipping_rules.data.loaders)

Loaders are not re-exported here: the context module imports the defaults
below, and the loaders import the context.
"""

from pathlib import Path

from .reference.defaults import (
    CONTEXT_TTL_SECONDS,
    DEFAULT_SIZE_CLASS,
    DEFAULT_WEIGHT_POINTS,
    OPTION_CODES,
    SHIPMENT_PREFERENCES,
)


REFERENCE_DIR = Path(__file__).parent / "reference"


__all__ = [
    "REFERENCE_DIR",
    "DEFAULT_SIZE_CLASS",
    "DEFAULT_WEIGHT_POINTS",
    "OPTION_CODES",
    "SHIPMENT_PREFERENCES",
    "CONTEXT_TTL_SECONDS",
]
