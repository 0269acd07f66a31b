"""
Delivery Date Estimates

Turns a result's lead time and delivery window into calendar dates when an
order is placed.

    lead time > 0   ship start = order date + lead time
                    delivery   = ship start + eta_max_days (if set)
    otherwise       delivery   = order date + eta_max_days (if set)

The order date is passed in, never read from the clock.
"""

from datetime import date, timedelta

from .models import EstimatedDates, ShippingCalcResult


def estimate_dates(result: ShippingCalcResult, order_date: date) -> EstimatedDates:
    """
    Estimated production start and delivery dates.

    Results carrying an error give no estimate.
    """
    if result.error is not None:
        return EstimatedDates()

    eta_max = result.eta_max_days

    if result.lead_time_days > 0:
        ship_start = order_date + timedelta(days=result.lead_time_days)
        delivery = ship_start + timedelta(days=eta_max) if eta_max else None
        return EstimatedDates(ship_start_date=ship_start, delivery_date=delivery)

    if eta_max:
        return EstimatedDates(delivery_date=order_date + timedelta(days=eta_max))

    return EstimatedDates()


__all__ = ["estimate_dates"]
