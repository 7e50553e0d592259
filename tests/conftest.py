"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from period_planner.domain.models import (
    Account,
    AccountType,
    BudgetType,
    Category,
    Frequency,
    InstallmentPurchase,
    RecurringTemplate,
    TransactionType,
)


# Monday, ten days into the month
TODAY = date(2025, 3, 10)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def accounts() -> list[Account]:
    """Payroll account, cash, a Visa at 85% utilization, and an investment"""
    return [
        Account(id="chk", name="Payroll", type=AccountType.CHECKING, balance=Decimal("12000")),
        Account(id="cash", name="Wallet", type=AccountType.CASH, balance=Decimal("500")),
        Account(
            id="card",
            name="Visa",
            type=AccountType.CREDIT,
            balance=Decimal("8500"),
            credit_limit=Decimal("10000"),
            cutoff_day=13,
            payment_day=3,
            annual_interest_rate=0.45,
        ),
        Account(id="inv", name="Brokerage", type=AccountType.INVESTMENT, balance=Decimal("50000")),
    ]


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="salary", name="Salary", type=TransactionType.INCOME),
        Category(id="rent", name="Rent", type=TransactionType.EXPENSE, budget_type=BudgetType.NEED),
        Category(id="groceries", name="Groceries", type=TransactionType.EXPENSE, budget_type=BudgetType.NEED),
        Category(id="streaming", name="Streaming", type=TransactionType.EXPENSE, budget_type=BudgetType.WANT),
        Category(id="electronics", name="Electronics", type=TransactionType.EXPENSE, budget_type=BudgetType.WANT),
        Category(id="savings", name="Savings", type=TransactionType.EXPENSE, budget_type=BudgetType.SAVINGS),
        Category(id="misc", name="Misc", type=TransactionType.EXPENSE),
    ]


@pytest.fixture
def templates() -> list[RecurringTemplate]:
    """
    Recurring items as seen on 2025-03-10.

    streaming is already overdue (due 03-05), gym is paused, and the
    internet bill points at an account missing from the snapshot.
    """
    return [
        RecurringTemplate(
            id="t-salary",
            amount=Decimal("9000"),
            description="Salary",
            type=TransactionType.INCOME,
            frequency=Frequency.SEMIMONTHLY,
            account_id="chk",
            category_id="salary",
            next_due_date=date(2025, 3, 15),
        ),
        RecurringTemplate(
            id="t-rent",
            amount=Decimal("7000"),
            description="Rent",
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            account_id="chk",
            category_id="rent",
            next_due_date=date(2025, 4, 1),
        ),
        RecurringTemplate(
            id="t-streaming",
            amount=Decimal("199"),
            description="Streaming",
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            account_id="chk",
            category_id="streaming",
            next_due_date=date(2025, 3, 5),
        ),
        RecurringTemplate(
            id="t-groceries",
            amount=Decimal("800"),
            description="Groceries",
            type=TransactionType.EXPENSE,
            frequency=Frequency.WEEKLY,
            account_id="chk",
            category_id="groceries",
            next_due_date=date(2025, 3, 10),
        ),
        RecurringTemplate(
            id="t-savings",
            amount=Decimal("1000"),
            description="Emergency fund",
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            account_id="chk",
            category_id="savings",
            next_due_date=date(2025, 3, 31),
        ),
        RecurringTemplate(
            id="t-gym",
            amount=Decimal("600"),
            description="Gym",
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            account_id="chk",
            next_due_date=date(2025, 3, 20),
            active=False,
        ),
        RecurringTemplate(
            id="t-internet",
            amount=Decimal("300"),
            description="Internet",
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            account_id="closed-account",
            next_due_date=date(2025, 3, 20),
        ),
    ]


@pytest.fixture
def purchases() -> list[InstallmentPurchase]:
    """Laptop mid-plan, phone on its last installment, and a settled TV"""
    return [
        InstallmentPurchase(
            id="msi-laptop",
            description="Laptop",
            total_amount=Decimal("12000"),
            installment_count=12,
            purchase_date=date(2024, 12, 20),
            account_id="card",
            paid_installment_count=2,
            paid_amount=Decimal("2000"),
            category_id="electronics",
        ),
        InstallmentPurchase(
            id="msi-phone",
            description="Phone",
            total_amount=Decimal("6000"),
            installment_count=6,
            purchase_date=date(2024, 9, 25),
            account_id="card",
            paid_installment_count=5,
            paid_amount=Decimal("5000"),
            category_id="misc",
        ),
        InstallmentPurchase(
            id="msi-tv",
            description="TV",
            total_amount=Decimal("3000"),
            installment_count=3,
            purchase_date=date(2024, 11, 1),
            account_id="card",
            paid_installment_count=3,
            paid_amount=Decimal("3000"),
        ),
    ]


@pytest.fixture
def snapshot_payload() -> Dict[str, Any]:
    """camelCase payload as the API layer sends it"""
    return {
        "periodType": "mensual",
        "mode": "calendar",
        "today": "2025-03-10",
        "accounts": [
            {"id": "chk", "name": "Payroll", "type": "debit", "balance": 12000},
            {"id": "cash", "name": "Wallet", "type": "cash", "balance": 500},
            {
                "id": "card",
                "name": "Visa",
                "type": "Tarjeta de Crédito",
                "balance": 8500,
                "creditLimit": 10000,
                "cutoffDay": 13,
                "paymentDay": 3,
                "annualInterestRate": 0.45,
            },
        ],
        "categories": [
            {"id": "salary", "name": "Salary", "type": "income"},
            {"id": "groceries", "name": "Groceries", "type": "expense", "budgetType": "NEEDS"},
            {"id": "electronics", "name": "Electronics", "type": "expense", "budgetType": "WANTS"},
        ],
        "recurringTemplates": [
            {
                "id": "t-salary",
                "amount": 9000,
                "description": "Salary",
                "type": "income",
                "frequency": "biweekly_15_30",
                "accountId": "chk",
                "categoryId": "salary",
                "nextDueDate": "2025-03-15",
            },
            {
                "id": "t-groceries",
                "amount": 800,
                "description": "Groceries",
                "type": "expense",
                "frequency": "WEEKLY",
                "accountId": "chk",
                "categoryId": "groceries",
                "nextDueDate": "2025-03-10",
            },
        ],
        "installmentPurchases": [
            {
                "id": "msi-laptop",
                "description": "Laptop",
                "totalAmount": 12000,
                "installmentCount": 12,
                "purchaseDate": "2024-12-20",
                "accountId": "card",
                "paidInstallmentCount": 2,
                "paidAmount": 2000,
                "categoryId": "electronics",
            },
        ],
    }
