"""Credit card billing cycle resolution (cutoff and payment dates)"""

from datetime import date, timedelta

from period_planner.domain.models import BillingCycle
from period_planner.utils.date_utils import add_months, clamp_day, days_between


def resolve_cycle(cutoff_day: int, payment_day: int, today: date) -> BillingCycle:
    """
    Resolve the open billing cycle for `today`.

    - Cutoff is this month's cutoff day (clamped to month length), or next
      month's when today is already past it.
    - The cycle starts the day after the previous month's cutoff.
    - Payment is the first `payment_day` strictly after the cutoff, which is
      the same month when payment_day > cutoff_day and the next month
      otherwise.
    """
    cutoff_date = clamp_day(today.year, today.month, cutoff_day)
    if today > cutoff_date:
        cutoff_date = add_months(cutoff_date, 1, day=cutoff_day)

    previous_cutoff = add_months(cutoff_date, -1, day=cutoff_day)
    cycle_start = previous_cutoff + timedelta(days=1)

    payment_date = clamp_day(cutoff_date.year, cutoff_date.month, payment_day)
    if payment_date <= cutoff_date:
        payment_date = add_months(payment_date, 1, day=payment_day)

    return BillingCycle(
        cycle_start=cycle_start,
        cutoff_date=cutoff_date,
        payment_date=payment_date,
        days_until_cutoff=days_between(today, cutoff_date),
        days_until_payment=days_between(today, payment_date),
        is_before_cutoff=today <= cutoff_date,
    )
