"""Per-card statement summary for the open billing cycle"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from period_planner.domain.billing_cycle import resolve_cycle
from period_planner.domain.installments import is_settled, remaining_installments
from period_planner.domain.interest import minimum_payment, monthly_interest, payoff_months
from period_planner.domain.models import (
    Account,
    InstallmentPurchase,
    MsiCharge,
    PlanningPolicy,
    StatementSummary,
)


def build_statement(
    account: Account,
    purchases: List[InstallmentPurchase],
    today: date,
    policy: PlanningPolicy | None = None,
) -> Optional[StatementSummary]:
    """
    Summarize what the open cycle of a credit card will bill.

    MSI charges are the unpaid installments dated between the cycle start
    and the cutoff (inclusive). Cards without cutoff/payment days configured
    have no statement.
    """
    if not account.is_credit or not account.has_billing_cycle:
        return None
    policy = policy or PlanningPolicy()

    cycle = resolve_cycle(account.cutoff_day, account.payment_day, today)

    charges: List[MsiCharge] = []
    for purchase in purchases:
        if purchase.account_id != account.id or is_settled(purchase, policy.msi_settled_tolerance):
            continue
        for installment in remaining_installments(purchase):
            if installment.due_date > cycle.cutoff_date:
                break
            if installment.due_date >= cycle.cycle_start:
                charges.append(
                    MsiCharge(
                        purchase_id=purchase.id,
                        description=purchase.description,
                        amount=installment.amount,
                        installment_number=installment.installment_number,
                        installment_count=purchase.installment_count,
                        remaining_amount=purchase.remaining_amount,
                        is_last_installment=installment.is_last_installment,
                    )
                )

    debt = abs(account.balance)
    rate = account.annual_interest_rate or 0.0
    utilization = None
    available_credit = None
    if account.credit_limit and account.credit_limit > 0:
        utilization = float(debt / account.credit_limit)
        available_credit = account.credit_limit - debt

    minimum = minimum_payment(float(debt), policy.min_payment_percent, policy.fixed_minimum_payment)

    return StatementSummary(
        account_id=account.id,
        account_name=account.name,
        cycle=cycle,
        msi_charges=charges,
        msi_total=sum((charge.amount for charge in charges), Decimal("0")),
        current_debt=debt,
        credit_limit=account.credit_limit,
        utilization=utilization,
        available_credit=available_credit,
        minimum_payment=minimum,
        monthly_interest=monthly_interest(float(debt), rate),
        payoff_months_at_minimum=payoff_months(float(debt), rate, minimum),
    )
