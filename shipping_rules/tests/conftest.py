"""
Shared fixtures: a small reference snapshot built from row dicts.

    zones       eu (no customs), ch (customs), old (inactive)
    countries   FR, DE -> eu; CH -> ch; XX -> old
    methods     m_std  (insurance, gift wrap; 2-4 days)
                m_exp  (all options; 1-2 days)
                m_old  (inactive)
    rate rules  eu/m_std 590 unbounded, eu/m_exp 1500 up to 10 weight points,
                ch/m_std 1990

No free thresholds or option prices by default; tests add what they need.
"""

import pytest

from shipping_rules.context import ShippingContext
from shipping_rules.models import CartLineItem


def _tables() -> dict[str, list[dict]]:
    return {
        "zones": [
            {"id": "eu", "name_fr": "Union européenne", "name_en": "European Union",
             "customs_notice": False, "active": True, "sort_order": 1},
            {"id": "ch", "name_fr": "Suisse", "name_en": "Switzerland",
             "customs_notice": True, "active": True, "sort_order": 2},
            {"id": "old", "name_fr": "Ancienne", "name_en": "Old",
             "customs_notice": False, "active": False, "sort_order": 3},
        ],
        "zone_countries": [
            {"zone_id": "eu", "country_code": "FR"},
            {"zone_id": "eu", "country_code": "DE"},
            {"zone_id": "ch", "country_code": "CH"},
            {"zone_id": "old", "country_code": "XX"},
        ],
        "size_classes": [
            {"code": "SMALL", "weight_points": 1, "active": True, "sort_order": 1},
            {"code": "MEDIUM", "weight_points": 2, "active": True, "sort_order": 2},
            {"code": "LARGE", "weight_points": 5, "active": True, "sort_order": 3},
            {"code": "HIDDEN", "weight_points": 9, "active": False, "sort_order": 4},
        ],
        "methods": [
            {"id": "m_std", "code": "standard", "name_fr": "Standard", "name_en": "Standard",
             "supports_insurance": True, "supports_signature": False, "supports_gift_wrap": True,
             "eta_min_days": 2, "eta_max_days": 4, "active": True, "sort_order": 1},
            {"id": "m_exp", "code": "express", "name_fr": "Express", "name_en": "Express",
             "supports_insurance": True, "supports_signature": True, "supports_gift_wrap": True,
             "eta_min_days": 1, "eta_max_days": 2, "active": True, "sort_order": 2},
            {"id": "m_old", "code": "retired", "name_fr": "Ancien", "name_en": "Retired",
             "supports_insurance": False, "supports_signature": False, "supports_gift_wrap": False,
             "eta_min_days": 5, "eta_max_days": 9, "active": False, "sort_order": 3},
        ],
        "options": [
            {"id": "opt_ins", "code": "insurance", "name_fr": "Assurance", "name_en": "Insurance", "active": True},
            {"id": "opt_sig", "code": "signature", "name_fr": "Signature", "name_en": "Signature", "active": True},
            {"id": "opt_gift", "code": "gift_wrap", "name_fr": "Cadeau", "name_en": "Gift wrap", "active": True},
        ],
        "rate_rules": [
            {"id": "r_eu_std", "zone_id": "eu", "method_id": "m_std",
             "min_subtotal": 0, "max_subtotal": None, "min_weight_points": 0, "max_weight_points": None,
             "price": 590, "active": True, "priority": 1},
            {"id": "r_eu_exp", "zone_id": "eu", "method_id": "m_exp",
             "min_subtotal": 0, "max_subtotal": None, "min_weight_points": 0, "max_weight_points": 10,
             "price": 1500, "active": True, "priority": 1},
            {"id": "r_ch_std", "zone_id": "ch", "method_id": "m_std",
             "min_subtotal": 0, "max_subtotal": None, "min_weight_points": 0, "max_weight_points": None,
             "price": 1990, "active": True, "priority": 1},
        ],
        "free_thresholds": [],
        "option_prices": [],
    }


@pytest.fixture
def tables():
    """Fresh copy of the fixture tables, safe to modify."""
    return _tables()


@pytest.fixture
def context(tables):
    return ShippingContext.from_records(**tables)


@pytest.fixture
def build_context(tables):
    """Build a context from the fixture tables plus overrides."""
    def _build(**overrides) -> ShippingContext:
        return ShippingContext.from_records(**{**tables, **overrides})
    return _build


@pytest.fixture
def ready_item():
    return CartLineItem(product_id="READY", quantity=1, unit_price=2000)


@pytest.fixture
def made_to_order_item():
    return CartLineItem(
        product_id="MTO",
        quantity=1,
        unit_price=8000,
        made_to_order=True,
        lead_time_days=21,
    )
