"""
Zone Resolver

Maps a destination country to its single active shipping zone.
"""

import polars as pl

from ..models import Zone


def normalise_country_code(country_code: str | None) -> str:
    return (country_code or "").strip().upper()


def resolve_zone(
    country_code: str,
    zones: pl.DataFrame,
    zone_countries: pl.DataFrame,
) -> Zone | None:
    """
    Find the active zone a country belongs to.

    There is no default zone: an unmapped country, or one mapped only to
    inactive zones, resolves to None.

    Args:
        country_code: ISO country code, any case
        zones: Zone table
        zone_countries: Country to zone mapping

    Returns:
        The active Zone, or None
    """
    code = normalise_country_code(country_code)
    if not code:
        return None

    matches = (
        zone_countries
        .filter(pl.col("country_code") == code)
        .join(zones, left_on="zone_id", right_on="id", how="inner")
        .filter(pl.col("active"))
        .sort(["sort_order", "zone_id"])
    )
    if matches.is_empty():
        return None

    row = matches.row(0, named=True)
    row["id"] = row.pop("zone_id")
    return Zone.from_row(row)


__all__ = ["resolve_zone", "normalise_country_code"]
