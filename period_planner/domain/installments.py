"""Installment (MSI) schedule resolution for interest-free card purchases"""

from datetime import date
from decimal import ROUND_DOWN, Decimal
from typing import Iterator, List

from period_planner.domain.models import Installment, InstallmentPurchase
from period_planner.utils.date_utils import add_months

CENT = Decimal("0.01")
DEFAULT_SETTLED_TOLERANCE = Decimal("0.50")


def monthly_payment_for(purchase: InstallmentPurchase) -> Decimal:
    """Equal installment amount, floored to cents (the last one absorbs the rest)"""
    if purchase.monthly_payment is not None:
        return purchase.monthly_payment
    if purchase.installment_count <= 0:
        return Decimal("0")
    return (purchase.total_amount / purchase.installment_count).quantize(CENT, rounding=ROUND_DOWN)


def installment_due_date(purchase: InstallmentPurchase, installment_number: int) -> date:
    """Installment k is due k calendar months after the purchase date"""
    return add_months(purchase.purchase_date, installment_number)


def installment_amount(purchase: InstallmentPurchase, installment_number: int) -> Decimal:
    """
    Amount charged for installment k.

    The last installment absorbs the rounding remainder so the cumulative
    paid amount equals the purchase total exactly:
        $1000.00 / 3 → [333.33, 333.33, 333.34]
    """
    monthly = monthly_payment_for(purchase)
    if installment_number < purchase.installment_count:
        return monthly

    # Paid before the last one: what is already recorded plus every
    # installment still scheduled ahead of it
    pending_before_last = purchase.installment_count - 1 - purchase.paid_installment_count
    paid_before_last = purchase.paid_amount + monthly * max(pending_before_last, 0)
    return max(purchase.total_amount - paid_before_last, Decimal("0"))


def is_settled(purchase: InstallmentPurchase, tolerance: Decimal = DEFAULT_SETTLED_TOLERANCE) -> bool:
    """Fully paid, allowing for small rounding leftovers"""
    if purchase.paid_installment_count >= purchase.installment_count:
        return True
    return purchase.remaining_amount <= tolerance


def remaining_installments(purchase: InstallmentPurchase) -> List[Installment]:
    """Every unpaid installment, in order"""
    installments = []
    for number in range(purchase.paid_installment_count + 1, purchase.installment_count + 1):
        installments.append(
            Installment(
                installment_number=number,
                due_date=installment_due_date(purchase, number),
                amount=installment_amount(purchase, number),
                is_last_installment=number == purchase.installment_count,
            )
        )
    return installments


def due_payments_in_window(purchase: InstallmentPurchase, window_start: date, window_end: date) -> Iterator[Installment]:
    """Unpaid installments whose due date falls in [window_start, window_end)"""
    for installment in remaining_installments(purchase):
        if installment.due_date >= window_end:
            return
        if installment.due_date >= window_start:
            yield installment
