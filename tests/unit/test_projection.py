"""Unit tests for the period projection engine"""

import logging
import pytest
from datetime import date
from decimal import Decimal
from period_planner.domain.alerts import (
    CUTOFF_SOON,
    DEBT_HIGH_VS_CASH,
    HIGH_UTILIZATION,
    MSI_ENDING,
    OVERDUE_PAYMENT,
    PAYMENT_DUE_TODAY,
)
from period_planner.domain.exceptions import InvalidPeriodError
from period_planner.domain.models import (
    InstallmentPurchase,
    MsiGroupKey,
    PeriodType,
    PlanningPolicy,
    ProjectionMode,
)
from period_planner.domain.projection import parse_mode, parse_period_type, project_period, resolve_window


@pytest.mark.parametrize(
    "period_type,start,end",
    [
        (PeriodType.WEEKLY, date(2025, 3, 10), date(2025, 3, 17)),
        (PeriodType.BIWEEKLY, date(2025, 3, 1), date(2025, 3, 16)),
        (PeriodType.MONTHLY, date(2025, 3, 1), date(2025, 4, 1)),
        (PeriodType.BIMONTHLY, date(2025, 3, 1), date(2025, 5, 1)),
        (PeriodType.SEMIANNUAL, date(2025, 1, 1), date(2025, 7, 1)),
        (PeriodType.ANNUAL, date(2025, 1, 1), date(2026, 1, 1)),
    ],
)
def test_calendar_windows(period_type, start, end, today):
    window = resolve_window(period_type, ProjectionMode.CALENDAR, today)
    assert (window.start, window.end) == (start, end)


def test_calendar_biweekly_second_half():
    window = resolve_window(PeriodType.BIWEEKLY, ProjectionMode.CALENDAR, date(2025, 2, 20))
    assert (window.start, window.end) == (date(2025, 2, 16), date(2025, 3, 1))


@pytest.mark.parametrize(
    "period_type,end",
    [
        (PeriodType.WEEKLY, date(2025, 3, 17)),
        (PeriodType.BIWEEKLY, date(2025, 3, 25)),
        (PeriodType.MONTHLY, date(2025, 4, 10)),
        (PeriodType.BIMONTHLY, date(2025, 5, 10)),
        (PeriodType.SEMIANNUAL, date(2025, 9, 10)),
        (PeriodType.ANNUAL, date(2026, 3, 10)),
    ],
)
def test_projection_windows_start_today(period_type, end, today):
    window = resolve_window(period_type, ProjectionMode.PROJECTION, today)
    assert (window.start, window.end) == (today, end)


def test_parse_period_and_mode():
    assert parse_period_type("mensual") == PeriodType.MONTHLY
    assert parse_period_type("QUINCENAL") == PeriodType.BIWEEKLY
    assert parse_period_type("semiannual") == PeriodType.SEMIANNUAL
    assert parse_mode("Projection") == ProjectionMode.PROJECTION
    with pytest.raises(InvalidPeriodError):
        parse_period_type("decade")
    with pytest.raises(InvalidPeriodError):
        parse_mode("forecast")


def test_monthly_calendar_summary(today, accounts, templates, purchases, categories):
    """March 2025: two paydays, weekly groceries, overdue streaming, two MSI installments"""
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)

    assert [item.due_date for item in summary.expected_income] == [date(2025, 3, 15), date(2025, 3, 31)]
    assert summary.totals.total_expected_income == Decimal("18000")
    assert summary.totals.total_expected_expenses == Decimal("4399")  # 199 + 4 x 800 + 1000
    assert summary.totals.total_msi_payments == Decimal("2000")
    assert summary.totals.total_commitments == Decimal("6399")

    assert summary.current_balance == Decimal("12500")  # checking + cash only
    assert summary.current_debt == Decimal("8500")
    assert summary.current_msi_debt == Decimal("11000")  # laptop 10000 + phone 1000
    assert summary.net_worth == Decimal("-7000")
    assert summary.projected_balance == Decimal("24101")
    assert summary.disposable_income == summary.projected_balance
    assert summary.is_sufficient is True
    assert summary.shortfall is None


def test_overdue_flag(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)
    overdue = [item for item in summary.expected_expenses if item.is_overdue]

    assert [(item.template_id, item.due_date) for item in overdue] == [("t-streaming", date(2025, 3, 5))]
    # due today is not overdue
    assert not any(item.is_overdue for item in summary.expected_expenses if item.due_date == today)


def test_inactive_and_orphan_templates_excluded(today, accounts, templates, purchases, categories, caplog):
    with caplog.at_level(logging.WARNING):
        summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)

    template_ids = {item.template_id for item in summary.expected_expenses}
    assert "t-gym" not in template_ids
    assert "t-internet" not in template_ids
    assert "Recurring template references unknown account" in caplog.text


def test_msi_payments(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)
    payments = {payment.purchase_id: payment for payment in summary.msi_payments_due}

    assert set(payments) == {"msi-laptop", "msi-phone"}  # TV is settled
    laptop = payments["msi-laptop"]
    assert (laptop.installment_number, laptop.due_date, laptop.amount) == (3, date(2025, 3, 20), Decimal("1000"))
    assert laptop.account_name == "Visa"
    assert laptop.is_last_installment is False
    assert payments["msi-phone"].is_last_installment is True
    assert payments["msi-phone"].description == "Installment Phone (6/6)"


def test_msi_grouped_by_account_and_date(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)

    group = summary.msi_by_account[MsiGroupKey(account_id="card", due_date=date(2025, 3, 20))]
    assert group.total == Decimal("1000")
    assert group.purchase_ids == ["msi-laptop"]
    assert len(summary.msi_by_account) == 2


def test_budget_analysis(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)
    budget = summary.budget_analysis

    assert budget.needs.projected == Decimal("3200")  # groceries
    assert budget.wants.projected == Decimal("1199")  # streaming + laptop installment
    assert budget.savings.projected == Decimal("1000")
    assert budget.unclassified == Decimal("1000")  # phone installment, "misc" has no budget type
    assert budget.needs.ideal == Decimal("9000")
    assert budget.wants.ideal == Decimal("5400")
    assert budget.savings.ideal == Decimal("3600")


def test_alert_order(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)

    assert [alert.code for alert in summary.alerts] == [
        HIGH_UTILIZATION,
        DEBT_HIGH_VS_CASH,
        OVERDUE_PAYMENT,
        PAYMENT_DUE_TODAY,
        MSI_ENDING,
        CUTOFF_SOON,
    ]
    assert len(summary.warnings) == 6


def test_timeline_running_balance(today, accounts, templates, purchases, categories):
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)
    balances = [(point.date, point.balance) for point in summary.timeline]

    assert balances[0] == (date(2025, 3, 5), Decimal("12301"))
    assert balances[-1] == (date(2025, 3, 31), summary.projected_balance)
    assert summary.lowest_balance == Decimal("11501")  # after groceries on the 10th


def test_projection_mode_carries_overdue(today, accounts, templates, purchases, categories):
    """Rolling window from today still includes the unpaid streaming bill from 03-05"""
    summary = project_period("monthly", "projection", today, accounts, templates, purchases, categories)
    streaming = [item for item in summary.expected_expenses if item.template_id == "t-streaming"]

    assert [(item.due_date, item.is_overdue) for item in streaming] == [
        (date(2025, 3, 5), True),
        (date(2025, 4, 5), False),
    ]
    assert summary.totals.total_expected_expenses == Decimal("12398")
    assert summary.projected_balance == Decimal("16102")


def test_projection_mode_without_carry(today, accounts, templates, purchases, categories):
    policy = PlanningPolicy(carry_overdue_occurrences=False)
    summary = project_period("monthly", "projection", today, accounts, templates, purchases, categories, policy)
    streaming = [item.due_date for item in summary.expected_expenses if item.template_id == "t-streaming"]

    assert streaming == [date(2025, 4, 5)]


def test_purchase_on_unknown_account_excluded(today, accounts, categories, caplog):
    orphan = InstallmentPurchase(
        id="msi-orphan",
        description="Sofa",
        total_amount=Decimal("6000"),
        installment_count=6,
        purchase_date=date(2025, 2, 10),
        account_id="closed-card",
    )
    with caplog.at_level(logging.WARNING):
        summary = project_period("monthly", "calendar", today, accounts, [], [orphan], categories)

    assert summary.msi_payments_due == []
    assert summary.current_msi_debt == 0
    assert "Installment purchase references unknown account" in caplog.text


@pytest.mark.parametrize("period_type", list(PeriodType))
@pytest.mark.parametrize("mode", list(ProjectionMode))
def test_summary_totals_are_consistent(period_type, mode, today, accounts, templates, purchases, categories):
    summary = project_period(period_type, mode, today, accounts, templates, purchases, categories)
    totals = summary.totals

    assert summary.projected_balance == (
        summary.current_balance
        + totals.total_expected_income
        - totals.total_expected_expenses
        - totals.total_msi_payments
    )
    assert summary.is_sufficient == (summary.projected_balance >= 0)
    assert (summary.shortfall is not None) == (not summary.is_sufficient)
    if summary.timeline:
        assert summary.timeline[-1].balance == summary.projected_balance


def test_insufficient_summary(today, accounts, templates, purchases, categories):
    accounts[0].balance = Decimal("-30000")
    summary = project_period("monthly", "calendar", today, accounts, templates, purchases, categories)

    assert summary.projected_balance == Decimal("-17899")
    assert summary.is_sufficient is False
    assert summary.shortfall == Decimal("17899")
    assert summary.alerts[0].code == "INSUFFICIENT_FUNDS"


def test_projection_is_deterministic(today, accounts, templates, purchases, categories):
    first = project_period("annual", "projection", today, accounts, templates, purchases, categories)
    second = project_period("annual", "projection", today, accounts, templates, purchases, categories)

    assert first == second
