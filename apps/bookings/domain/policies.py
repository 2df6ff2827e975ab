"""
Booking Policies

Business rules that don't naturally fit in the Booking model itself.
"""

from datetime import date
from decimal import Decimal

from django.conf import settings

from shared.domain.value_objects import Money


class CancellationPolicy:
    """
    Refund tiers for renter/owner cancellations

    A tier is ``(minimum lead days, refund percent)``; the first tier whose
    minimum the lead time reaches wins. Lead time is counted in whole days
    from the cancellation date to the start date.

    Default tiers:
    - 7 or more days before start: 100 % refund
    - 3 to 6 days before start: 50 % refund
    - less than 3 days: no refund
    """

    def __init__(self, tiers=None):
        tiers = tiers if tiers is not None else settings.CANCELLATION_REFUND_TIERS
        self.tiers = sorted(tiers, key=lambda tier: tier[0], reverse=True)

    def refund_percentage(self, start_date: date, today: date) -> int:
        lead_days = (start_date - today).days
        for min_days, percentage in self.tiers:
            if lead_days >= min_days:
                return int(percentage)
        return 0

    def refund_amount(self, total_price, start_date: date, today: date) -> Money:
        percentage = self.refund_percentage(start_date, today)
        return Money(total_price).percent(percentage).rounded()


class DamageDepositPolicy:
    """Deposit the renter owes after a condition report"""

    DAMAGE_CONDITIONS = frozenset({"MINOR_DAMAGE", "BROKEN", "MISSING_PARTS"})

    def __init__(self, amount=None):
        self.amount = Decimal(str(amount if amount is not None else settings.DAMAGE_DEPOSIT_AMOUNT))

    def requires_deposit(self, condition: str) -> bool:
        return condition in self.DAMAGE_CONDITIONS

    def deposit_for(self, condition: str) -> Decimal:
        return self.amount if self.requires_deposit(condition) else Decimal("0.00")
