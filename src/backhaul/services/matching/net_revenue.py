"""Net revenue split between customer and carrier under a fleet rate agreement."""

from __future__ import annotations

from ...models.domain import NetRevenue, RateConfig

DEFAULT_STOP_COUNT = 2  # pickup + delivery


def calculate_net_revenue(total_revenue: float, additional_miles: float, config: RateConfig) -> NetRevenue:
    """Customer net credit = customer share - OOR mileage - stops - OOR fuel - other charges."""
    revenue = total_revenue or 0.0
    oor_miles = max(0.0, additional_miles or 0.0)
    carrier_pct = (config.revenue_split_carrier_pct or 20.0) / 100
    mpg = config.fuel_mpg or 6.0

    fsc_per_mile = 0.0
    if config.doe_padd_rate > 0 and config.fuel_peg > 0 and mpg > 0:
        fsc_per_mile = (config.doe_padd_rate - config.fuel_peg) / mpg

    customer_share = revenue * (1 - carrier_pct)
    mileage_expense = oor_miles * config.mileage_rate
    stop_expense = DEFAULT_STOP_COUNT * config.stop_rate
    fuel_surcharge = oor_miles * fsc_per_mile
    other_charges = config.other_charge_1 + config.other_charge_2

    return NetRevenue(
        fsc_per_mile=fsc_per_mile,
        customer_share=customer_share,
        carrier_revenue=revenue * carrier_pct,
        mileage_expense=mileage_expense,
        stop_expense=stop_expense,
        stop_count=DEFAULT_STOP_COUNT,
        fuel_surcharge=fuel_surcharge,
        other_charges=other_charges,
        customer_net_credit=customer_share - mileage_expense - stop_expense - fuel_surcharge - other_charges,
    )
