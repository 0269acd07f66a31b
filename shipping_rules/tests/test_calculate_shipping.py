"""
Unit Tests for the Shipping Calculator

End-to-end checks of calculate_shipping(): scenarios, error short-circuits,
free-shipping precedence, option pricing and split shipments.

Run with: pytest shipping_rules/tests/test_calculate_shipping.py -v
"""

import pytest

from shipping_rules.calculate_shipping import active_methods, calculate_shipping, quote_methods
from shipping_rules.models import (
    NO_METHOD,
    NO_RATE_RULE,
    NO_ZONE,
    CartLineItem,
    SelectedOptions,
    ShippingCalcRequest,
)


def make_request(items, country_code="FR", method_id="m_std", preference="single", **options):
    return ShippingCalcRequest(
        items=items,
        country_code=country_code,
        method_id=method_id,
        options=SelectedOptions(**options),
        shipment_preference=preference,
    )


def line(product_id="P1", quantity=1, unit_price=3000, **kwargs):
    return CartLineItem(product_id=product_id, quantity=quantity, unit_price=unit_price, **kwargs)


# =============================================================================
# SCENARIOS
# =============================================================================

class TestScenarios:
    """Reference scenarios."""

    def test_domestic_under_threshold(self, context):
        """Subtotal 3000 in EU on standard pays the 590 rule."""
        result = calculate_shipping(make_request([line(unit_price=3000)]), context)
        assert result.error is None
        assert result.shipping_price == 590
        assert result.is_free_shipping is False
        assert result.zone.id == "eu"
        assert result.method.code == "standard"

    def test_free_shipping(self, build_context):
        """Zone-wide threshold of 5000 with subtotal 6000 ships free."""
        context = build_context(
            free_thresholds=[{"id": "ft_eu", "zone_id": "eu", "method_id": None, "threshold": 5000, "active": True}],
            option_prices=[{"id": "op_ins", "option_id": "opt_ins", "zone_id": None, "method_id": None,
                            "price": 300, "active": True}],
        )
        result = calculate_shipping(make_request([line(unit_price=6000)], insurance=True), context)
        assert result.is_free_shipping is True
        assert result.options_price == 300
        assert result.shipping_price == 300

    def test_unmapped_country(self, context):
        """ZZ has no zone mapping."""
        result = calculate_shipping(make_request([line()], country_code="ZZ"), context)
        assert result.error == NO_ZONE
        assert result.shipping_price == 0
        assert result.zone is None
        assert result.method is None
        assert result.customs_notice is False

    def test_split_shipment(self, context, ready_item, made_to_order_item):
        """Ready 2000 + made-to-order 8000 (21 days) splits into two legs."""
        result = calculate_shipping(
            make_request([ready_item, made_to_order_item], preference="split"), context
        )
        assert result.error is None
        assert result.split_details is not None
        assert result.split_details.ready_shipment.shipping_price == 590
        assert result.split_details.made_to_order_shipment.shipping_price == 590
        assert result.split_details.made_to_order_shipment.lead_time_days == 21
        assert result.lead_time_days == 21
        assert result.shipping_price == 1180


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:
    """Error short-circuits keep what was resolved."""

    def test_inactive_zone_is_no_zone(self, context):
        result = calculate_shipping(make_request([line()], country_code="XX"), context)
        assert result.error == NO_ZONE

    def test_unknown_method(self, context):
        result = calculate_shipping(make_request([line()], method_id="m_missing"), context)
        assert result.error == NO_METHOD
        assert result.shipping_price == 0
        assert result.zone.id == "eu"
        assert result.method is None

    def test_inactive_method(self, context):
        result = calculate_shipping(make_request([line()], method_id="m_old"), context)
        assert result.error == NO_METHOD

    def test_no_method_keeps_customs_notice(self, context):
        result = calculate_shipping(make_request([line()], country_code="CH", method_id="m_old"), context)
        assert result.error == NO_METHOD
        assert result.customs_notice is True

    def test_no_rate_rule(self, context):
        """Express only covers up to 10 weight points; 15 has no rule."""
        items = [line(quantity=3, size_class_code="LARGE", made_to_order=True, lead_time_days=10)]
        result = calculate_shipping(make_request(items, method_id="m_exp", insurance=True), context)
        assert result.error == NO_RATE_RULE
        assert result.shipping_price == 0
        assert result.options_price == 0
        assert result.zone.id == "eu"
        assert result.method.id == "m_exp"
        assert (result.eta_min_days, result.eta_max_days) == (1, 2)
        assert result.lead_time_days == 10

    def test_no_rate_rule_for_zone(self, context):
        """CH has no express rule at all."""
        result = calculate_shipping(make_request([line()], country_code="CH", method_id="m_exp"), context)
        assert result.error == NO_RATE_RULE
        assert result.customs_notice is True

    def test_free_shipping_avoids_no_rate_rule(self, build_context):
        """A free order never reports a missing rule."""
        context = build_context(
            free_thresholds=[{"id": "ft_ch", "zone_id": "ch", "method_id": "m_exp", "threshold": 1000, "active": True}],
        )
        result = calculate_shipping(make_request([line()], country_code="CH", method_id="m_exp"), context)
        assert result.error is None
        assert result.is_free_shipping is True
        assert result.shipping_price == 0


# =============================================================================
# RESULT FIELDS
# =============================================================================

class TestResultFields:
    """ETA, lead time, customs notice and serialisation."""

    def test_eta_from_method(self, context):
        result = calculate_shipping(make_request([line()], method_id="m_exp"), context)
        assert (result.eta_min_days, result.eta_max_days) == (1, 2)

    def test_unset_eta_reported_as_zero(self, tables, build_context):
        tables["methods"][0]["eta_max_days"] = None
        context = build_context(methods=tables["methods"])
        result = calculate_shipping(make_request([line()]), context)
        assert result.eta_max_days == 0
        assert result.eta_min_days == 2

    def test_lead_time_is_max_not_sum(self, context):
        items = [
            line("A", made_to_order=True, lead_time_days=10),
            line("B", made_to_order=True, lead_time_days=21),
            line("C", made_to_order=False, lead_time_days=40),
        ]
        result = calculate_shipping(make_request(items), context)
        assert result.lead_time_days == 21

    def test_no_lead_time_without_made_to_order(self, context):
        result = calculate_shipping(make_request([line()]), context)
        assert result.lead_time_days == 0

    def test_customs_notice_from_zone(self, context):
        result = calculate_shipping(make_request([line()], country_code="CH"), context)
        assert result.customs_notice is True
        assert result.shipping_price == 1990

    def test_single_mode_has_no_split_details(self, context):
        result = calculate_shipping(make_request([line()]), context)
        assert result.split_details is None

    def test_to_dict(self, context):
        data = calculate_shipping(make_request([line()]), context).to_dict()
        assert data["shipping_price"] == 590
        assert data["zone"]["id"] == "eu"
        assert data["method"]["code"] == "standard"
        assert data["error"] is None

    def test_deterministic(self, context, ready_item, made_to_order_item):
        request = make_request([ready_item, made_to_order_item], preference="split", insurance=True)
        assert calculate_shipping(request, context) == calculate_shipping(request, context)


# =============================================================================
# FREE SHIPPING PRECEDENCE
# =============================================================================

class TestFreeShippingPrecedence:
    """A reached threshold skips rate-rule matching."""

    def test_rate_rule_matcher_not_called(self, build_context, monkeypatch):
        context = build_context(
            free_thresholds=[{"id": "ft_eu", "zone_id": "eu", "method_id": None, "threshold": 5000, "active": True}],
        )

        def _fail(*args, **kwargs):
            raise AssertionError("rate rule matcher called for a free order")

        monkeypatch.setattr("shipping_rules.rules.group.find_best_rule", _fail)
        result = calculate_shipping(make_request([line(unit_price=6000)]), context)
        assert result.is_free_shipping is True
        assert result.shipping_price == 0

    def test_method_scoped_threshold(self, build_context):
        context = build_context(
            free_thresholds=[{"id": "ft_exp", "zone_id": "eu", "method_id": "m_exp", "threshold": 5000, "active": True}],
        )
        standard = calculate_shipping(make_request([line(unit_price=6000)]), context)
        express = calculate_shipping(make_request([line(unit_price=6000)], method_id="m_exp"), context)
        assert standard.is_free_shipping is False
        assert standard.shipping_price == 590
        assert express.is_free_shipping is True

    def test_below_threshold_pays(self, build_context):
        context = build_context(
            free_thresholds=[{"id": "ft_eu", "zone_id": "eu", "method_id": None, "threshold": 5000, "active": True}],
        )
        result = calculate_shipping(make_request([line(unit_price=4999)]), context)
        assert result.is_free_shipping is False
        assert result.shipping_price == 590


# =============================================================================
# OPTIONS
# =============================================================================

@pytest.fixture
def option_context(build_context):
    """Insurance priced at all three levels, signature global only."""
    return build_context(option_prices=[
        {"id": "op_ins_global", "option_id": "opt_ins", "zone_id": None, "method_id": None, "price": 500, "active": True},
        {"id": "op_ins_eu", "option_id": "opt_ins", "zone_id": "eu", "method_id": None, "price": 400, "active": True},
        {"id": "op_ins_eu_exp", "option_id": "opt_ins", "zone_id": "eu", "method_id": "m_exp", "price": 250, "active": True},
        {"id": "op_sig_global", "option_id": "opt_sig", "zone_id": None, "method_id": None, "price": 350, "active": True},
    ])


class TestOptions:
    """Add-on pricing in the orchestrated result."""

    def test_zone_and_method_price_wins(self, option_context):
        result = calculate_shipping(make_request([line()], method_id="m_exp", insurance=True), option_context)
        assert result.options_price == 250
        assert result.shipping_price == 1500 + 250

    def test_zone_price_when_no_method_row(self, option_context):
        result = calculate_shipping(make_request([line()], insurance=True), option_context)
        assert result.options_price == 400

    def test_global_price_elsewhere(self, option_context):
        result = calculate_shipping(make_request([line()], country_code="CH", insurance=True), option_context)
        assert result.options_price == 500

    def test_unsupported_option_ignored(self, option_context):
        """Standard cannot carry signature: ignored, no error."""
        result = calculate_shipping(make_request([line()], signature=True), option_context)
        assert result.error is None
        assert result.options_price == 0
        assert result.shipping_price == 590

    def test_unpriced_option_costs_nothing(self, option_context):
        result = calculate_shipping(make_request([line()], gift_wrap=True), option_context)
        assert result.options_price == 0

    def test_options_add_up(self, option_context):
        result = calculate_shipping(
            make_request([line()], method_id="m_exp", insurance=True, signature=True, gift_wrap=True),
            option_context,
        )
        assert result.options_price == 250 + 350


# =============================================================================
# SPLIT SHIPMENTS
# =============================================================================

class TestSplitShipments:
    """Split mode pricing."""

    def test_additivity_with_options_once(self, option_context, ready_item, made_to_order_item):
        result = calculate_shipping(
            make_request([ready_item, made_to_order_item], preference="split", insurance=True),
            option_context,
        )
        split = result.split_details
        assert result.options_price == 400
        assert result.shipping_price == (
            split.ready_shipment.shipping_price +
            split.made_to_order_shipment.shipping_price +
            result.options_price
        )
        assert result.shipping_price == 590 + 590 + 400

    def test_only_ready_items(self, context, ready_item):
        result = calculate_shipping(make_request([ready_item], preference="split"), context)
        split = result.split_details
        assert split.ready_shipment.shipping_price == 590
        assert split.made_to_order_shipment.shipping_price == 0
        assert split.made_to_order_shipment.item_count == 0
        assert result.shipping_price == 590
        assert result.lead_time_days == 0

    def test_leg_eta_windows(self, context, ready_item, made_to_order_item):
        result = calculate_shipping(
            make_request([ready_item, made_to_order_item], method_id="m_exp", preference="split"), context
        )
        for leg in (result.split_details.ready_shipment, result.split_details.made_to_order_shipment):
            assert (leg.eta_min_days, leg.eta_max_days) == (1, 2)

    def test_missing_rule_on_one_leg(self, context):
        """The bulky ready leg has no express rule: it costs 0 and carries the error."""
        items = [
            line("BULKY", quantity=3, size_class_code="LARGE"),
            line("MTO", size_class_code="SMALL", made_to_order=True, lead_time_days=14),
        ]
        result = calculate_shipping(make_request(items, method_id="m_exp", preference="split"), context)
        assert result.error is None
        assert result.split_details.ready_shipment.error == NO_RATE_RULE
        assert result.split_details.ready_shipment.shipping_price == 0
        assert result.split_details.made_to_order_shipment.error is None
        assert result.shipping_price == 1500

    def test_order_wide_free_shipping(self, build_context, ready_item, made_to_order_item):
        context = build_context(
            free_thresholds=[{"id": "ft_eu", "zone_id": "eu", "method_id": None, "threshold": 5000, "active": True}],
        )
        result = calculate_shipping(
            make_request([ready_item, made_to_order_item], preference="split"), context
        )
        assert result.is_free_shipping is True
        assert result.shipping_price == 0
        assert result.split_details.ready_shipment.is_free_shipping is True
        assert result.split_details.made_to_order_shipment.is_free_shipping is True

    def test_below_order_threshold_nothing_free(self, build_context, ready_item, made_to_order_item):
        """Cart of 10000 under an 11000 threshold: neither leg ships free."""
        context = build_context(
            free_thresholds=[{"id": "ft_eu", "zone_id": "eu", "method_id": None, "threshold": 11000, "active": True}],
        )
        result = calculate_shipping(
            make_request([ready_item, made_to_order_item], preference="split"), context
        )
        assert result.is_free_shipping is False
        assert result.split_details.ready_shipment.is_free_shipping is False
        assert result.split_details.made_to_order_shipment.is_free_shipping is False
        assert result.shipping_price == 1180

    def test_split_still_fails_on_no_zone(self, context, ready_item):
        result = calculate_shipping(make_request([ready_item], country_code="ZZ", preference="split"), context)
        assert result.error == NO_ZONE
        assert result.split_details is None


# =============================================================================
# METHOD LISTING
# =============================================================================

class TestQuoteMethods:
    """Quoting every active method."""

    def test_active_methods_in_order(self, context):
        assert [m.id for m in active_methods(context.methods)] == ["m_std", "m_exp"]

    def test_quotes_each_active_method(self, context):
        quotes = quote_methods(make_request([line()], method_id="ignored"), context)
        assert [(m.id, r.shipping_price) for m, r in quotes] == [("m_std", 590), ("m_exp", 1500)]

    def test_unavailable_method_reported(self, context):
        quotes = dict((m.id, r) for m, r in quote_methods(make_request([line()], country_code="CH"), context))
        assert quotes["m_std"].error is None
        assert quotes["m_exp"].error == NO_RATE_RULE
