"""
Shipping Calculator
===================

Interactive CLI tool to quote shipping for a single cart against the
bundled reference snapshot.

Usage:
    python -m shipping_rules.scripts.calculator
"""

from datetime import date

from shipping_rules.calculate_shipping import active_methods, calculate_shipping
from shipping_rules.context import ShippingContext
from shipping_rules.data.loaders import load_context
from shipping_rules.data.reference.defaults import DEFAULT_SIZE_CLASS, SINGLE, SPLIT
from shipping_rules.dates import estimate_dates
from shipping_rules.models import CartLineItem, SelectedOptions, ShippingCalcRequest, ShippingCalcResult
from shipping_rules.rules import price_options
from shipping_rules.version import VERSION


def _yes(prompt: str) -> bool:
    return input(f"{prompt} (y/N): ").strip().lower() in ("y", "yes")


def get_cart_lines() -> list[CartLineItem]:
    """Prompt for cart lines until an empty product id."""
    print("\nCart lines (empty product id to finish)")
    items = []
    while True:
        product_id = input(f"  Line {len(items) + 1} product id: ").strip()
        if not product_id:
            break
        quantity = int(input("    Quantity: "))
        unit_price = int(input("    Unit price (minor units, e.g. 4500 = 45.00): "))
        size_class = input(f"    Size class [{DEFAULT_SIZE_CLASS}]: ").strip().upper() or None
        made_to_order = _yes("    Made to order?")
        lead_time = int(input("    Lead time (days): ")) if made_to_order else None
        items.append(CartLineItem(
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            made_to_order=made_to_order,
            lead_time_days=lead_time,
            size_class_code=size_class,
        ))
    return items


def get_user_input(context: ShippingContext) -> ShippingCalcRequest:
    """Prompt user for destination, method, options and cart."""
    print("\n=== Shipping Cost Calculator ===")
    print(f"Version: {VERSION}\n")

    country_code = input("Destination country code (e.g. FR): ").strip()

    methods = active_methods(context.methods)
    print("\nMethod:")
    for i, method in enumerate(methods, start=1):
        print(f"  {i}. {method.name_en or method.code}")
    choice = int(input(f"Select (1-{len(methods)}): ").strip())
    method = methods[choice - 1]

    print("\nOptions:")
    options = SelectedOptions(
        insurance=_yes("  Insurance?"),
        signature=_yes("  Signature on delivery?"),
        gift_wrap=_yes("  Gift wrap?"),
    )

    items = get_cart_lines()
    preference = SPLIT if _yes("\nShip ready items first (split shipment)?") else SINGLE

    return ShippingCalcRequest(
        items=items,
        country_code=country_code,
        method_id=method.id,
        options=options,
        shipment_preference=preference,
    )


def _amount(minor_units: int) -> str:
    return f"{minor_units / 100:>9.2f}"


def print_results(result: ShippingCalcResult, request: ShippingCalcRequest, context: ShippingContext) -> None:
    """Print calculation results."""
    print("\n" + "=" * 50)
    print("CALCULATION RESULTS")
    print("=" * 50)

    print(f"\nDestination: {request.country_code.upper()}", end="")
    print(f" (zone {result.zone.id})" if result.zone else "")
    if result.method:
        print(f"Method: {result.method.code}")

    if result.error:
        print(f"\nNo shipping available: {result.error}")
        return

    if result.customs_notice:
        print("Customs duties may apply at destination.")

    print(f"\nDelivery: {result.eta_min_days}-{result.eta_max_days} days", end="")
    if result.lead_time_days:
        print(f" after {result.lead_time_days} days of production")
    else:
        print()

    print("\n--- Cost Breakdown ---")
    split = result.split_details
    if split is not None:
        print(f"Ready shipment:     {_amount(split.ready_shipment.shipping_price)}")
        print(f"Made-to-order:      {_amount(split.made_to_order_shipment.shipping_price)}")
        for name, leg in (("Ready", split.ready_shipment), ("Made-to-order", split.made_to_order_shipment)):
            if leg.error:
                print(f"  Warning: {name} leg has no rate rule ({leg.error})")
    elif result.is_free_shipping:
        print(f"Base rate:          {'FREE':>9}")
    else:
        print(f"Base rate:          {_amount(result.shipping_price - result.options_price)}")

    options = price_options(request.options, result.method, result.zone.id, context.options, context.option_prices)
    for code, price in options.items():
        print(f"{code.replace('_', ' ').capitalize() + ':':<20}{_amount(price)}")

    print(f"                    {'=' * 9}")
    print(f"TOTAL:              {_amount(result.shipping_price)}")

    dates = estimate_dates(result, date.today())
    if dates.ship_start_date:
        print(f"\nEstimated ship date: {dates.ship_start_date}")
    if dates.delivery_date:
        print(f"Estimated delivery: {dates.delivery_date}")
    print()


def main():
    """Main entry point."""
    try:
        context = load_context()
        request = get_user_input(context)
        result = calculate_shipping(request, context)
        print_results(result, request, context)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
