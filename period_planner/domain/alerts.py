"""Alert generation for period summaries"""

from datetime import date
from decimal import Decimal
from typing import List

from period_planner.domain.billing_cycle import resolve_cycle
from period_planner.domain.models import (
    Account,
    Alert,
    AlertSeverity,
    BudgetAnalysis,
    ExpectedItem,
    MsiPayment,
    PeriodTotals,
    PlanningPolicy,
)

INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
HIGH_UTILIZATION = "HIGH_UTILIZATION"
DEBT_HIGH_VS_CASH = "DEBT_HIGH_VS_CASH"
DEBT_WITHOUT_CASH = "DEBT_WITHOUT_CASH"
OVERDUE_PAYMENT = "OVERDUE_PAYMENT"
PAYMENT_DUE_TODAY = "PAYMENT_DUE_TODAY"
MSI_ENDING = "MSI_ENDING"
COMMITMENTS_NEAR_LIQUIDITY = "COMMITMENTS_NEAR_LIQUIDITY"
NEEDS_OVER_IDEAL = "NEEDS_OVER_IDEAL"
CUTOFF_SOON = "CUTOFF_SOON"


def credit_utilization(account: Account) -> float | None:
    """Debt / limit for a credit account, None without a usable limit"""
    if not account.is_credit or not account.credit_limit or account.credit_limit <= 0:
        return None
    return float(abs(account.balance) / account.credit_limit)


def build_alerts(
    *,
    today: date,
    accounts: List[Account],
    expenses: List[ExpectedItem],
    msi_payments: List[MsiPayment],
    totals: PeriodTotals,
    current_balance: Decimal,
    current_debt: Decimal,
    projected_balance: Decimal,
    budget: BudgetAnalysis,
    policy: PlanningPolicy,
) -> List[Alert]:
    """
    Build alerts in a fixed order; every rule is independent.

    Order: insufficient funds, high utilization, debt health, overdue
    payments, payments due today, MSI ending, commitments near liquidity,
    needs over ideal, cutoff soon.
    """
    alerts: List[Alert] = []

    if projected_balance < 0:
        alerts.append(
            Alert(
                code=INSUFFICIENT_FUNDS,
                severity=AlertSeverity.WARNING,
                message=f"Insufficient funds: projected shortfall of ${-projected_balance:,.2f} this period.",
            )
        )

    for account in accounts:
        utilization = credit_utilization(account)
        if utilization is not None and utilization > policy.high_utilization_threshold:
            alerts.append(
                Alert(
                    code=HIGH_UTILIZATION,
                    severity=AlertSeverity.WARNING,
                    message=f"High debt utilization on {account.name}: {utilization:.0%} of the credit limit.",
                    reference_id=account.id,
                )
            )

    debt_limit = current_balance * Decimal(str(policy.debt_to_cash_alert_ratio))
    if current_debt > 0 and current_balance > 0 and current_debt > debt_limit:
        alerts.append(
            Alert(
                code=DEBT_HIGH_VS_CASH,
                severity=AlertSeverity.WARNING,
                message=(
                    f"Card debt (${current_debt:,.2f}) is above "
                    f"{policy.debt_to_cash_alert_ratio:.0%} of your cash (${current_balance:,.2f})."
                ),
            )
        )
    elif current_debt > 0 and current_balance <= 0:
        alerts.append(
            Alert(
                code=DEBT_WITHOUT_CASH,
                severity=AlertSeverity.WARNING,
                message=f"You carry ${current_debt:,.2f} of card debt and no cash. Prioritize liquidity.",
            )
        )

    overdue = [item for item in expenses if item.is_overdue] + [item for item in msi_payments if item.is_overdue]
    for item in overdue:
        alerts.append(
            Alert(
                code=OVERDUE_PAYMENT,
                severity=AlertSeverity.WARNING,
                message=f"Overdue payment: {item.description} (${item.amount:,.2f}) was due {item.due_date.isoformat()}.",
                reference_id=item.id,
            )
        )

    for item in expenses:
        if item.due_date == today:
            alerts.append(
                Alert(
                    code=PAYMENT_DUE_TODAY,
                    severity=AlertSeverity.INFO,
                    message=f"{item.description} (${item.amount:,.2f}) is due today.",
                    reference_id=item.template_id,
                )
            )

    for payment in msi_payments:
        if payment.is_last_installment:
            alerts.append(
                Alert(
                    code=MSI_ENDING,
                    severity=AlertSeverity.INFO,
                    message=f"{payment.description} ends with this installment on {payment.due_date.isoformat()}.",
                    reference_id=payment.purchase_id,
                )
            )

    liquidity = current_balance + totals.total_expected_income
    commitments = totals.total_commitments
    if (
        projected_balance >= 0
        and commitments > 0
        and liquidity > 0
        and commitments > liquidity * Decimal(str(policy.commitments_alert_ratio))
    ):
        alerts.append(
            Alert(
                code=COMMITMENTS_NEAR_LIQUIDITY,
                severity=AlertSeverity.WARNING,
                message=(
                    f"Commitments (${commitments:,.2f}) use more than "
                    f"{policy.commitments_alert_ratio:.0%} of available money (${liquidity:,.2f})."
                ),
            )
        )

    if totals.total_expected_income > 0 and budget.needs.projected > budget.needs.ideal:
        alerts.append(
            Alert(
                code=NEEDS_OVER_IDEAL,
                severity=AlertSeverity.WARNING,
                message=(
                    f"Needs (${budget.needs.projected:,.2f}) exceed the ideal "
                    f"{policy.needs_ratio:.0%} of income (${budget.needs.ideal:,.2f})."
                ),
            )
        )

    for account in accounts:
        if not account.is_credit or not account.has_billing_cycle:
            continue
        cycle = resolve_cycle(account.cutoff_day, account.payment_day, today)
        if cycle.days_until_cutoff == policy.cutoff_alert_days:
            alerts.append(
                Alert(
                    code=CUTOFF_SOON,
                    severity=AlertSeverity.INFO,
                    message=f"{account.name} closes its statement in {cycle.days_until_cutoff} days ({cycle.cutoff_date.isoformat()}).",
                    reference_id=account.id,
                )
            )

    return alerts
