"""
Rental pricing

The price of a booking is fixed once, at admission: the daily rate times
the number of rental days (both endpoints counted), minus the PRO member
discount.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.value_objects import DateRange, Money


@dataclass(frozen=True)
class PriceQuote:
    """Breakdown of a booking price"""
    days: int
    daily_rate: Money
    subtotal: Money
    discount: Money
    total: Money


def quote_rental(price_per_day, dates: DateRange, discount_percentage=Decimal('0')) -> PriceQuote:
    """
    Price a rental of ``dates`` at ``price_per_day``

    Examples:
        - 10.00/day, 3 days, no discount -> 30.00
        - 10.00/day, 3 days, 5 % discount -> 28.50
    """
    daily_rate = Money(price_per_day)
    days = len(dates)
    subtotal = (daily_rate * days).rounded()

    if discount_percentage:
        total = (subtotal - subtotal.percent(discount_percentage)).rounded()
    else:
        total = subtotal

    return PriceQuote(
        days=days,
        daily_rate=daily_rate,
        subtotal=subtotal,
        discount=subtotal - total,
        total=total,
    )
