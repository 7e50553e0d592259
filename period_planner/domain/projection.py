"""Period projection engine - forward-looking cash-flow summary for a period"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from period_planner.domain.alerts import build_alerts
from period_planner.domain.budget import classify_expenses
from period_planner.domain.exceptions import InvalidPeriodError
from period_planner.domain.frequency import occurrences_in_window
from period_planner.domain.installments import due_payments_in_window, is_settled
from period_planner.domain.models import (
    LIQUID_ACCOUNT_TYPES,
    Account,
    Category,
    ExpectedItem,
    InstallmentPurchase,
    MsiGroup,
    MsiGroupKey,
    MsiPayment,
    PeriodSummary,
    PeriodTotals,
    PeriodType,
    PeriodWindow,
    PlanningPolicy,
    ProjectionMode,
    RecurringTemplate,
    TimelinePoint,
    TransactionType,
)
from period_planner.utils.date_utils import add_months, add_years, first_of_next_month

PERIOD_ALIASES = {
    "semanal": PeriodType.WEEKLY,
    "quincenal": PeriodType.BIWEEKLY,
    "mensual": PeriodType.MONTHLY,
    "bimestral": PeriodType.BIMONTHLY,
    "semestral": PeriodType.SEMIANNUAL,
    "anual": PeriodType.ANNUAL,
}

# Rolling window lengths for projection mode: (days, months)
PROJECTION_LENGTHS = {
    PeriodType.WEEKLY: (7, 0),
    PeriodType.BIWEEKLY: (15, 0),
    PeriodType.MONTHLY: (0, 1),
    PeriodType.BIMONTHLY: (0, 2),
    PeriodType.SEMIANNUAL: (0, 6),
    PeriodType.ANNUAL: (0, 12),
}


def parse_period_type(value: str | PeriodType) -> PeriodType:
    """Resolve a period type, accepting the Spanish names used by the app"""
    if isinstance(value, PeriodType):
        return value
    key = str(value).lower()
    if key in PERIOD_ALIASES:
        return PERIOD_ALIASES[key]
    try:
        return PeriodType(key)
    except ValueError:
        raise InvalidPeriodError(f"Invalid period type: {value!r}") from None


def parse_mode(value: str | ProjectionMode) -> ProjectionMode:
    if isinstance(value, ProjectionMode):
        return value
    try:
        return ProjectionMode(str(value).lower())
    except ValueError:
        raise InvalidPeriodError(f"Invalid projection mode: {value!r}") from None


def resolve_window(period_type: PeriodType, mode: ProjectionMode, today: date) -> PeriodWindow:
    """
    Half-open [start, end) window for the requested period.

    Calendar mode aligns to the calendar period containing today (weeks start
    on Monday, biweekly is 1-15 / 16-end, bimonthly pairs Jan-Feb, Mar-Apr, ...).
    Projection mode is a rolling window starting today.
    """
    if mode == ProjectionMode.PROJECTION:
        days, months = PROJECTION_LENGTHS[period_type]
        end = add_months(today, months) + timedelta(days=days)
        return PeriodWindow(start=today, end=end, period_type=period_type, mode=mode)

    if period_type == PeriodType.WEEKLY:
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=7)
    elif period_type == PeriodType.BIWEEKLY:
        if today.day <= 15:
            start, end = today.replace(day=1), today.replace(day=16)
        else:
            start, end = today.replace(day=16), first_of_next_month(today)
    elif period_type == PeriodType.MONTHLY:
        start = today.replace(day=1)
        end = first_of_next_month(today)
    elif period_type == PeriodType.BIMONTHLY:
        start = date(today.year, today.month - (today.month - 1) % 2, 1)
        end = add_months(start, 2)
    elif period_type == PeriodType.SEMIANNUAL:
        start = date(today.year, 1 if today.month <= 6 else 7, 1)
        end = add_months(start, 6)
    else:
        start = date(today.year, 1, 1)
        end = add_years(start, 1)

    return PeriodWindow(start=start, end=end, period_type=period_type, mode=mode)


def _expected_items(
    template: RecurringTemplate,
    window: PeriodWindow,
    today: date,
    category: Optional[Category],
    policy: PlanningPolicy,
) -> List[ExpectedItem]:
    due_dates = list(occurrences_in_window(template, window.start, window.end))

    # A missed occurrence before the window is still owed
    carried = template.next_due_date
    if (
        policy.carry_overdue_occurrences
        and template.type == TransactionType.EXPENSE
        and carried < window.start
        and carried < today
        and (template.end_date is None or carried < template.end_date)
    ):
        due_dates.insert(0, carried)

    return [
        ExpectedItem(
            id=f"{template.id}-{due_date.isoformat()}",
            template_id=template.id,
            description=template.description,
            amount=template.amount,
            due_date=due_date,
            type=template.type,
            account_id=template.account_id,
            category=category,
            is_overdue=template.type == TransactionType.EXPENSE and due_date < today,
        )
        for due_date in due_dates
    ]


def _msi_payments(
    purchase: InstallmentPurchase,
    account: Account,
    window: PeriodWindow,
    today: date,
    category: Optional[Category],
) -> List[MsiPayment]:
    payments = []
    for installment in due_payments_in_window(purchase, window.start, window.end):
        number = installment.installment_number
        payments.append(
            MsiPayment(
                id=f"{purchase.id}-{number}",
                purchase_id=purchase.id,
                description=f"Installment {purchase.description} ({number}/{purchase.installment_count})",
                amount=installment.amount,
                due_date=installment.due_date,
                account_id=account.id,
                account_name=account.name,
                installment_number=number,
                installment_count=purchase.installment_count,
                msi_total=purchase.total_amount,
                paid_amount=purchase.paid_amount,
                is_last_installment=installment.is_last_installment,
                category=category,
                is_overdue=installment.due_date < today,
            )
        )
    return payments


def group_msi_by_account(payments: Iterable[MsiPayment]) -> Dict[MsiGroupKey, MsiGroup]:
    """Aggregate installments billed to the same card on the same date"""
    groups: Dict[MsiGroupKey, MsiGroup] = {}
    for payment in payments:
        key = MsiGroupKey(account_id=payment.account_id, due_date=payment.due_date)
        group = groups.setdefault(key, MsiGroup(account_name=payment.account_name))
        group.total += payment.amount
        group.count += 1
        group.purchase_ids.append(payment.purchase_id)
    return groups


def build_timeline(
    current_balance: Decimal,
    income: Iterable[ExpectedItem],
    outflows: Iterable[ExpectedItem | MsiPayment],
) -> List[TimelinePoint]:
    """Running balance after each due date, starting from the current balance"""
    inflow_by_date: Dict[date, Decimal] = defaultdict(Decimal)
    outflow_by_date: Dict[date, Decimal] = defaultdict(Decimal)
    for item in income:
        inflow_by_date[item.due_date] += item.amount
    for item in outflows:
        outflow_by_date[item.due_date] += item.amount

    timeline = []
    balance = current_balance
    for day in sorted(set(inflow_by_date) | set(outflow_by_date)):
        inflow = inflow_by_date.get(day, Decimal("0"))
        outflow = outflow_by_date.get(day, Decimal("0"))
        balance = balance + inflow - outflow
        timeline.append(TimelinePoint(date=day, inflow=inflow, outflow=outflow, balance=balance))
    return timeline


def project_period(
    period_type: str | PeriodType,
    mode: str | ProjectionMode,
    today: date,
    accounts: List[Account],
    templates: List[RecurringTemplate],
    purchases: List[InstallmentPurchase],
    categories: List[Category],
    policy: PlanningPolicy | None = None,
) -> PeriodSummary:
    """
    Main entry point: project income, commitments, and balance for a period.

    Pure function of its arguments; `today` is injected rather than read from
    the clock. Templates and purchases pointing at accounts missing from the
    snapshot are left out of every total.
    """
    policy = policy or PlanningPolicy()
    window = resolve_window(parse_period_type(period_type), parse_mode(mode), today)
    logging.debug(
        "Resolved projection window",
        extra={"window_start": window.start.isoformat(), "window_end": window.end.isoformat()},
    )

    accounts_by_id = {account.id: account for account in accounts}
    categories_by_id = {category.id: category for category in categories}

    # 1. Recurring income and expenses
    expected_income: List[ExpectedItem] = []
    expected_expenses: List[ExpectedItem] = []
    for template in templates:
        if not template.active:
            continue
        if template.account_id not in accounts_by_id:
            logging.warning(
                "Recurring template references unknown account",
                extra={"template_id": template.id, "account_id": template.account_id},
            )
            continue
        items = _expected_items(template, window, today, categories_by_id.get(template.category_id), policy)
        if template.type == TransactionType.INCOME:
            expected_income.extend(items)
        else:
            expected_expenses.extend(items)

    # 2. MSI installments
    msi_payments_due: List[MsiPayment] = []
    current_msi_debt = Decimal("0")
    for purchase in purchases:
        if is_settled(purchase, policy.msi_settled_tolerance):
            continue
        account = accounts_by_id.get(purchase.account_id)
        if account is None:
            logging.warning(
                "Installment purchase references unknown account",
                extra={"purchase_id": purchase.id, "account_id": purchase.account_id},
            )
            continue
        if not account.is_credit:
            logging.warning(
                "Installment purchase is not on a credit account",
                extra={"purchase_id": purchase.id, "account_id": account.id},
            )
        current_msi_debt += max(purchase.remaining_amount, Decimal("0"))
        msi_payments_due.extend(
            _msi_payments(purchase, account, window, today, categories_by_id.get(purchase.category_id))
        )

    expected_income.sort(key=lambda item: item.due_date)
    expected_expenses.sort(key=lambda item: item.due_date)
    msi_payments_due.sort(key=lambda item: item.due_date)

    # 3. Balances and totals
    current_balance = sum((a.balance for a in accounts if a.type in LIQUID_ACCOUNT_TYPES), Decimal("0"))
    current_debt = sum((abs(a.balance) for a in accounts if a.is_credit), Decimal("0"))

    totals = PeriodTotals(
        total_expected_income=sum((i.amount for i in expected_income), Decimal("0")),
        total_expected_expenses=sum((e.amount for e in expected_expenses), Decimal("0")),
        total_msi_payments=sum((m.amount for m in msi_payments_due), Decimal("0")),
    )
    projected_balance = current_balance + totals.total_expected_income - totals.total_commitments
    is_sufficient = projected_balance >= 0

    # 4. 50/30/20 analysis
    budget = classify_expenses(
        [(e.amount, e.category) for e in expected_expenses] + [(m.amount, m.category) for m in msi_payments_due],
        totals.total_expected_income,
        policy,
    )

    timeline = build_timeline(current_balance, expected_income, [*expected_expenses, *msi_payments_due])
    lowest_balance = min([current_balance] + [point.balance for point in timeline])

    alerts = build_alerts(
        today=today,
        accounts=accounts,
        expenses=expected_expenses,
        msi_payments=msi_payments_due,
        totals=totals,
        current_balance=current_balance,
        current_debt=current_debt,
        projected_balance=projected_balance,
        budget=budget,
        policy=policy,
    )

    return PeriodSummary(
        window=window,
        today=today,
        current_balance=current_balance,
        current_debt=current_debt,
        current_msi_debt=current_msi_debt,
        expected_income=expected_income,
        expected_expenses=expected_expenses,
        msi_payments_due=msi_payments_due,
        totals=totals,
        projected_balance=projected_balance,
        net_worth=current_balance - current_debt - current_msi_debt,
        is_sufficient=is_sufficient,
        shortfall=None if is_sufficient else -projected_balance,
        budget_analysis=budget,
        timeline=timeline,
        lowest_balance=lowest_balance,
        msi_by_account=group_msi_by_account(msi_payments_due),
        alerts=alerts,
    )
