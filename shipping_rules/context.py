"""
Rules Context

Read-only snapshot of the eight reference tables the engine evaluates against.

Every table is held as a polars DataFrame with a fixed schema. Tables are
normalised when the snapshot is assembled (missing optional columns added,
types cast, country codes upper-cased) and then validated, so rule modules
can rely on the schema below without re-checking it.

All tables of one context must come from the same refresh cycle. Refreshing
and caching snapshots is the caller's concern.
"""

from dataclasses import dataclass, fields

import polars as pl

from .data.reference.defaults import OPTION_CODES


# =============================================================================
# SCHEMAS
# =============================================================================

TABLE_SCHEMAS: dict[str, dict[str, pl.DataType]] = {
    "zones": {
        "id": pl.Utf8,
        "name_fr": pl.Utf8,
        "name_en": pl.Utf8,
        "customs_notice": pl.Boolean,
        "active": pl.Boolean,
        "sort_order": pl.Int64,
    },
    "zone_countries": {
        "zone_id": pl.Utf8,
        "country_code": pl.Utf8,
    },
    "size_classes": {
        "code": pl.Utf8,
        "weight_points": pl.Int64,
        "active": pl.Boolean,
        "sort_order": pl.Int64,
    },
    "methods": {
        "id": pl.Utf8,
        "code": pl.Utf8,
        "name_fr": pl.Utf8,
        "name_en": pl.Utf8,
        "supports_insurance": pl.Boolean,
        "supports_signature": pl.Boolean,
        "supports_gift_wrap": pl.Boolean,
        "eta_min_days": pl.Int64,
        "eta_max_days": pl.Int64,
        "active": pl.Boolean,
        "sort_order": pl.Int64,
    },
    "options": {
        "id": pl.Utf8,
        "code": pl.Utf8,
        "name_fr": pl.Utf8,
        "name_en": pl.Utf8,
        "active": pl.Boolean,
    },
    "rate_rules": {
        "id": pl.Utf8,
        "zone_id": pl.Utf8,
        "method_id": pl.Utf8,
        "min_subtotal": pl.Int64,
        "max_subtotal": pl.Int64,
        "min_weight_points": pl.Int64,
        "max_weight_points": pl.Int64,
        "price": pl.Int64,
        "active": pl.Boolean,
        "priority": pl.Int64,
    },
    "free_thresholds": {
        "id": pl.Utf8,
        "zone_id": pl.Utf8,
        "method_id": pl.Utf8,
        "threshold": pl.Int64,
        "active": pl.Boolean,
    },
    "option_prices": {
        "id": pl.Utf8,
        "option_id": pl.Utf8,
        "zone_id": pl.Utf8,
        "method_id": pl.Utf8,
        "price": pl.Int64,
        "active": pl.Boolean,
    },
}

# Columns that may be omitted, with the value used when absent or null.
# A default of None means "leave null" (nullable column).
OPTIONAL_COLUMNS: dict[str, dict[str, object]] = {
    "zones": {"name_fr": None, "name_en": None, "customs_notice": False, "active": True, "sort_order": 0},
    "zone_countries": {},
    "size_classes": {"active": True, "sort_order": 0},
    "methods": {
        "name_fr": None,
        "name_en": None,
        "supports_insurance": False,
        "supports_signature": False,
        "supports_gift_wrap": False,
        "eta_min_days": None,
        "eta_max_days": None,
        "active": True,
        "sort_order": 0,
    },
    "options": {"name_fr": None, "name_en": None, "active": True},
    "rate_rules": {
        "min_subtotal": 0,
        "max_subtotal": None,
        "min_weight_points": 0,
        "max_weight_points": None,
        "active": True,
        "priority": 0,
    },
    "free_thresholds": {"method_id": None, "active": True},
    "option_prices": {"zone_id": None, "method_id": None, "active": True},
}

# Primary key per table, checked for duplicates
PRIMARY_KEYS = {
    "zones": "id",
    "size_classes": "code",
    "methods": "id",
    "options": "id",
    "rate_rules": "id",
    "free_thresholds": "id",
    "option_prices": "id",
}

TRUTHY = ["true", "t", "1", "yes", "y"]


# =============================================================================
# CONTEXT
# =============================================================================

@dataclass(frozen=True)
class ShippingContext:
    """
    Immutable reference snapshot.

    Build with from_frames() or from_records(); both normalise and validate.
    The plain constructor trusts its input.
    """

    zones: pl.DataFrame
    zone_countries: pl.DataFrame
    size_classes: pl.DataFrame
    methods: pl.DataFrame
    options: pl.DataFrame
    rate_rules: pl.DataFrame
    free_thresholds: pl.DataFrame
    option_prices: pl.DataFrame

    @classmethod
    def from_frames(cls, **tables: pl.DataFrame) -> "ShippingContext":
        """
        Assemble a context from one DataFrame per table.

        Tables not given are treated as empty. Unknown table names raise.

        Raises:
            ValueError: If a table is unknown, misses required columns,
                or the snapshot fails validate_context()
        """
        unknown = set(tables) - set(TABLE_SCHEMAS)
        if unknown:
            raise ValueError(f"Unknown reference tables: {sorted(unknown)}")

        normalised = {
            name: normalise_table(name, tables.get(name))
            for name in TABLE_SCHEMAS
        }
        context = cls(**normalised)
        validate_context(context)
        return context

    @classmethod
    def from_records(cls, **tables: list[dict]) -> "ShippingContext":
        """Assemble a context from lists of row dicts (e.g. a JSON snapshot)."""
        frames = {
            name: pl.from_dicts(rows, infer_schema_length=None) if rows else None
            for name, rows in tables.items()
        }
        return cls.from_frames(**{k: v for k, v in frames.items() if v is not None})

    def tables(self) -> dict[str, pl.DataFrame]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def summary(self) -> dict[str, int]:
        """Row count per table."""
        return {name: df.height for name, df in self.tables().items()}


# =============================================================================
# NORMALISATION
# =============================================================================

def normalise_table(name: str, df: pl.DataFrame | None) -> pl.DataFrame:
    """
    Cast a raw table to its schema.

    Missing optional columns are added with their default, nulls in
    defaulted columns are filled, and extra columns are dropped.

    Raises:
        ValueError: If a required column is missing
    """
    schema = TABLE_SCHEMAS[name]
    optional = OPTIONAL_COLUMNS[name]

    if df is None or (df.height == 0 and not df.columns):
        return pl.DataFrame(schema=schema)

    missing = [c for c in schema if c not in df.columns and c not in optional]
    if missing:
        raise ValueError(f"{name}: missing required columns {missing}")

    exprs = []
    for column, dtype in schema.items():
        default = optional.get(column)
        if column not in df.columns:
            exprs.append(pl.lit(default, dtype=dtype).alias(column))
            continue

        expr = cast_column(pl.col(column), dtype, df.schema[column])
        if default is not None:
            expr = expr.fill_null(pl.lit(default, dtype=dtype))
        exprs.append(expr.alias(column))

    df = df.select(exprs)

    if name == "zone_countries":
        df = df.with_columns(pl.col("country_code").str.strip_chars().str.to_uppercase())

    return df


def cast_column(expr: pl.Expr, dtype: pl.DataType, source: pl.DataType) -> pl.Expr:
    """Cast a column, parsing text booleans ("true", "1", "yes") from CSV or JSON."""
    if dtype == pl.Boolean and source == pl.Utf8:
        return (
            pl.when(expr.is_null())
            .then(pl.lit(None, dtype=pl.Boolean))
            .otherwise(expr.str.strip_chars().str.to_lowercase().is_in(TRUTHY))
        )
    return expr.cast(dtype)


# =============================================================================
# VALIDATION
# =============================================================================

def validate_context(context: ShippingContext) -> None:
    """
    Validate snapshot integrity.

    Raises ValueError listing every problem found. Called from from_frames()
    so a broken snapshot fails at assembly, not halfway through a checkout.
    """
    errors = []

    for name, key in PRIMARY_KEYS.items():
        df = getattr(context, name)
        if df[key].null_count() > 0:
            errors.append(f"{name}: {df[key].null_count()} row(s) without {key}")
        dupes = df.filter(pl.col(key).is_duplicated())[key].unique().sort().to_list()
        if dupes:
            errors.append(f"{name}: duplicate {key} {dupes}")

    negative = context.size_classes.filter(pl.col("weight_points") < 0)["code"].to_list()
    if negative:
        errors.append(f"size_classes: negative weight_points for {negative}")

    unknown_codes = (
        context.options
        .filter(~pl.col("code").is_in(list(OPTION_CODES)))["code"]
        .to_list()
    )
    if unknown_codes:
        errors.append(f"options: unknown option codes {unknown_codes} (expected one of {OPTION_CODES})")

    inverted = context.rate_rules.filter(
        (pl.col("max_subtotal").is_not_null() & (pl.col("min_subtotal") > pl.col("max_subtotal"))) |
        (pl.col("max_weight_points").is_not_null() & (pl.col("min_weight_points") > pl.col("max_weight_points")))
    )["id"].to_list()
    if inverted:
        errors.append(f"rate_rules: min bound above max bound in {inverted}")

    # A country maps to at most one active zone
    ambiguous = (
        context.zone_countries
        .join(context.zones.filter(pl.col("active")), left_on="zone_id", right_on="id", how="inner")
        .group_by("country_code")
        .agg(pl.col("zone_id").n_unique().alias("_zones"))
        .filter(pl.col("_zones") > 1)
        .sort("country_code")["country_code"]
        .to_list()
    )
    if ambiguous:
        errors.append(f"zone_countries: countries mapped to more than one active zone {ambiguous}")

    if errors:
        raise ValueError("Invalid shipping context:\n  " + "\n  ".join(errors))


__all__ = [
    "ShippingContext",
    "TABLE_SCHEMAS",
    "OPTIONAL_COLUMNS",
    "normalise_table",
    "cast_column",
    "validate_context",
]
