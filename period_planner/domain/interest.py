"""
Credit card interest and amortization math.

Standard approximations for projections; banks apply their own proprietary
formulas. Degenerate inputs return 0 or infinity instead of raising, and
monetary results are rounded to cents (half away from zero) only at the end.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from period_planner.domain.models import AmortizationRow, PaymentCost

DEFAULT_MIN_PAYMENT_PERCENT = 0.05
DEFAULT_FIXED_MINIMUM = 200.0
DEFAULT_COST_MAX_MONTHS = 120
DEFAULT_TABLE_MAX_MONTHS = 60

# Balances below one cent are treated as paid off
ZERO_BALANCE_EPSILON = 0.01


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero"""
    if math.isinf(value) or math.isnan(value):
        return value
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def monthly_interest(balance: float, annual_rate: float) -> float:
    """
    Interest accrued in one month: balance × annual_rate / 12.

    Example: $10,000 at 45% → 375.00
    """
    if balance <= 0 or annual_rate <= 0:
        return 0.0
    return round2(balance * annual_rate / 12)


def minimum_payment(
    balance: float,
    percent_rate: float = DEFAULT_MIN_PAYMENT_PERCENT,
    fixed_minimum: float = DEFAULT_FIXED_MINIMUM,
) -> float:
    """
    Minimum payment: max(balance × percent_rate, fixed_minimum).

    Examples: 5000 → 250, 2000 → 200 (fixed floor), 100000 → 5000
    """
    if balance <= 0:
        return 0.0
    return round2(max(balance * percent_rate, fixed_minimum))


def payoff_months(balance: float, annual_rate: float, monthly_payment: float) -> float:
    """
    Months needed to pay off `balance` with a fixed monthly payment.

    Returns math.inf when the payment does not exceed the monthly interest,
    i.e. the debt never shrinks. Otherwise uses the amortization closed form
    n = -ln(1 - P·r / PMT) / ln(1 + r), rounded up.
    """
    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        return math.inf

    rate = max(annual_rate, 0) / 12
    if rate == 0:
        return math.ceil(balance / monthly_payment)

    # Compared against unrounded interest
    interest_share = balance * rate / monthly_payment
    if interest_share >= 1:
        return math.inf

    months = -math.log(1 - interest_share) / math.log(1 + rate)
    return math.ceil(months)


def minimum_payment_cost(
    balance: float,
    annual_rate: float,
    min_payment_percent: float = DEFAULT_MIN_PAYMENT_PERCENT,
    max_months: int = DEFAULT_COST_MAX_MONTHS,
    fixed_minimum: float = DEFAULT_FIXED_MINIMUM,
) -> PaymentCost:
    """
    Simulate paying only the minimum every month.

    Stops once the balance is cleared or after `max_months`; a non-zero
    `remaining_balance` means payoff would take longer than `max_months`.
    """
    if balance <= 0:
        return PaymentCost(months=0, total_paid=0.0, total_interest=0.0)

    remaining = balance
    total_paid = 0.0
    total_interest = 0.0
    months = 0
    rate = max(annual_rate, 0) / 12

    while remaining > 0 and months < max_months:
        months += 1
        interest = remaining * rate
        payment = min(max(remaining * min_payment_percent, fixed_minimum), remaining + interest)

        total_paid += payment
        total_interest += interest
        remaining = remaining + interest - payment

        if remaining < ZERO_BALANCE_EPSILON:
            remaining = 0.0

    return PaymentCost(
        months=months,
        total_paid=round2(total_paid),
        total_interest=round2(total_interest),
        remaining_balance=round2(remaining),
    )


def amortization_table(
    balance: float,
    annual_rate: float,
    monthly_payment: float,
    max_months: int = DEFAULT_TABLE_MAX_MONTHS,
) -> List[AmortizationRow]:
    """
    Month-by-month split of a fixed payment into interest and principal.

    The last payment is reduced to whatever is left (balance + interest), so
    the balance never goes negative.

    Example (10000, 0.45, 500), first row:
        month=1 payment=500 principal=125 interest=375 balance=9875
    """
    if balance <= 0 or monthly_payment <= 0:
        return []

    rows: List[AmortizationRow] = []
    remaining = balance
    rate = max(annual_rate, 0) / 12

    month = 1
    while month <= max_months and remaining > ZERO_BALANCE_EPSILON:
        interest = remaining * rate
        payment = min(monthly_payment, remaining + interest)
        principal = payment - interest

        remaining -= principal
        if remaining < ZERO_BALANCE_EPSILON:
            remaining = 0.0

        rows.append(
            AmortizationRow(
                month=month,
                payment=round2(payment),
                principal=round2(principal),
                interest=round2(interest),
                balance=round2(remaining),
            )
        )
        month += 1

    return rows
