"""Pydantic schemas for snapshot validation and summary serialization"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from period_planner.domain.exceptions import UnsupportedFrequencyError
from period_planner.domain.frequency import parse_frequency
from period_planner.domain.models import (
    Account,
    AccountType,
    AmortizationRow,
    BudgetBucket,
    BudgetType,
    Category,
    Frequency,
    InstallmentPurchase,
    PaymentCost,
    PeriodSummary,
    RecurringTemplate,
    StatementSummary,
    TransactionType,
)
from period_planner.utils.date_utils import to_utc_date

ACCOUNT_TYPE_ALIASES = {
    "debit": AccountType.CHECKING,
    "checking": AccountType.CHECKING,
    "savings": AccountType.CHECKING,
    "cash": AccountType.CASH,
    "efectivo": AccountType.CASH,
    "credit": AccountType.CREDIT,
    "credit card": AccountType.CREDIT,
    "tarjeta de crédito": AccountType.CREDIT,
    "loan": AccountType.LOAN,
    "investment": AccountType.INVESTMENT,
}

BUDGET_TYPE_ALIASES = {
    "need": BudgetType.NEED,
    "needs": BudgetType.NEED,
    "want": BudgetType.WANT,
    "wants": BudgetType.WANT,
    "savings": BudgetType.SAVINGS,
}


def _coerce_utc_date(value: Any) -> Any:
    """Accept ISO dates and datetimes; aware datetimes are read in UTC"""
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return to_utc_date(value)
    return value


UtcDate = Annotated[date, BeforeValidator(_coerce_utc_date)]


def _money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class CamelModel(BaseModel):
    """Base schema speaking camelCase JSON"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Input snapshot ---------------------------------------------------------


class AccountSchema(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    type: AccountType
    balance: Decimal = Decimal("0")
    credit_limit: Optional[Decimal] = Field(None, ge=0)
    cutoff_day: Optional[int] = Field(None, ge=1, le=31)
    payment_day: Optional[int] = Field(None, ge=1, le=31)
    annual_interest_rate: Optional[float] = Field(None, ge=0)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ACCOUNT_TYPE_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value

    def to_domain(self) -> Account:
        return Account(
            id=self.id,
            name=self.name or self.id,
            type=self.type,
            balance=self.balance,
            credit_limit=self.credit_limit,
            cutoff_day=self.cutoff_day,
            payment_day=self.payment_day,
            annual_interest_rate=self.annual_interest_rate,
        )


class CategorySchema(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    type: TransactionType = TransactionType.EXPENSE
    budget_type: Optional[BudgetType] = None

    @field_validator("type", mode="before")
    @classmethod
    def lowercase_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("budget_type", mode="before")
    @classmethod
    def normalize_budget_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return BUDGET_TYPE_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value

    def to_domain(self) -> Category:
        return Category(id=self.id, name=self.name, type=self.type, budget_type=self.budget_type)


class RecurringTemplateSchema(CamelModel):
    id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: str = ""
    type: TransactionType
    frequency: Frequency
    account_id: str
    category_id: Optional[str] = None
    start_date: Optional[UtcDate] = None
    next_due_date: UtcDate
    end_date: Optional[UtcDate] = None
    active: bool = True

    @field_validator("type", mode="before")
    @classmethod
    def lowercase_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("frequency", mode="before")
    @classmethod
    def resolve_frequency(cls, value: Any) -> Frequency:
        try:
            return parse_frequency(value)
        except UnsupportedFrequencyError as e:
            raise ValueError(str(e)) from e

    def to_domain(self) -> RecurringTemplate:
        return RecurringTemplate(
            id=self.id,
            amount=self.amount,
            description=self.description,
            type=self.type,
            frequency=self.frequency,
            account_id=self.account_id,
            next_due_date=self.next_due_date,
            category_id=self.category_id,
            start_date=self.start_date,
            end_date=self.end_date,
            active=self.active,
        )


class InstallmentPurchaseSchema(CamelModel):
    id: str = Field(..., min_length=1)
    description: str = ""
    total_amount: Decimal = Field(..., gt=0)
    installment_count: int = Field(..., ge=1)
    purchase_date: UtcDate
    account_id: str
    paid_installment_count: int = Field(0, ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    category_id: Optional[str] = None
    monthly_payment: Optional[Decimal] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_paid(self) -> "InstallmentPurchaseSchema":
        if self.paid_amount > self.total_amount:
            raise ValueError("paidAmount cannot exceed totalAmount")
        if self.paid_installment_count > self.installment_count:
            raise ValueError("paidInstallmentCount cannot exceed installmentCount")
        return self

    def to_domain(self) -> InstallmentPurchase:
        return InstallmentPurchase(
            id=self.id,
            description=self.description,
            total_amount=self.total_amount,
            installment_count=self.installment_count,
            purchase_date=self.purchase_date,
            account_id=self.account_id,
            paid_installment_count=self.paid_installment_count,
            paid_amount=self.paid_amount,
            category_id=self.category_id,
            monthly_payment=self.monthly_payment,
        )


class PeriodRequest(CamelModel):
    """Snapshot handed over by the API layer for one projection"""

    period_type: str = "biweekly"
    mode: str = "calendar"
    today: UtcDate
    accounts: List[AccountSchema] = []
    recurring_templates: List[RecurringTemplateSchema] = []
    installment_purchases: List[InstallmentPurchaseSchema] = []
    categories: List[CategorySchema] = []


# --- Output records ---------------------------------------------------------


class CategoryRef(CamelModel):
    id: str
    name: str
    budget_type: Optional[BudgetType] = None


class ExpectedItemSchema(CamelModel):
    id: str
    template_id: str
    description: str
    amount: float
    due_date: date
    type: TransactionType
    account_id: str
    category: Optional[CategoryRef] = None
    is_overdue: bool


class MsiPaymentSchema(CamelModel):
    id: str
    purchase_id: str
    description: str
    amount: float
    due_date: date
    account_id: str
    account_name: str
    installment_number: int
    installment_count: int
    msi_total: float
    paid_amount: float
    is_last_installment: bool
    is_overdue: bool
    is_msi: bool = True
    category: Optional[CategoryRef] = None


class MsiGroupSchema(CamelModel):
    account_id: str
    due_date: date
    account_name: str
    total: float
    count: int
    purchase_ids: List[str]


class BudgetBucketSchema(CamelModel):
    projected: float
    ideal: float
    difference: float

    @classmethod
    def from_domain(cls, bucket: BudgetBucket) -> "BudgetBucketSchema":
        return cls(projected=float(bucket.projected), ideal=float(bucket.ideal), difference=float(bucket.difference))


class BudgetAnalysisSchema(CamelModel):
    needs: BudgetBucketSchema
    wants: BudgetBucketSchema
    savings: BudgetBucketSchema
    unclassified: float


class TimelinePointSchema(CamelModel):
    day: date = Field(..., alias="date")
    inflow: float
    outflow: float
    balance: float


class AlertSchema(CamelModel):
    code: str
    severity: str
    message: str
    reference_id: Optional[str] = None


class PeriodSummaryResponse(CamelModel):
    """Plain nested record rendered by presentation layers"""

    period_start: date
    period_end: date
    period_type: str
    mode: str
    current_balance: float
    current_debt: float
    current_msi_debt: float = Field(..., alias="currentMSIDebt")
    expected_income: List[ExpectedItemSchema]
    expected_expenses: List[ExpectedItemSchema]
    msi_payments_due: List[MsiPaymentSchema]
    msi_by_account: List[MsiGroupSchema]
    total_expected_income: float
    total_expected_expenses: float
    total_msi_payments: float = Field(..., alias="totalMSIPayments")
    total_commitments: float
    projected_balance: float
    disposable_income: float
    net_worth: float
    lowest_balance: float
    is_sufficient: bool
    shortfall: Optional[float] = None
    budget_analysis: BudgetAnalysisSchema
    timeline: List[TimelinePointSchema]
    alerts: List[AlertSchema]
    warnings: List[str]

    @classmethod
    def from_domain(cls, summary: PeriodSummary) -> "PeriodSummaryResponse":
        def category_ref(category: Optional[Category]) -> Optional[CategoryRef]:
            if category is None:
                return None
            return CategoryRef(id=category.id, name=category.name, budget_type=category.budget_type)

        def expected(item) -> ExpectedItemSchema:
            return ExpectedItemSchema(
                id=item.id,
                template_id=item.template_id,
                description=item.description,
                amount=float(item.amount),
                due_date=item.due_date,
                type=item.type,
                account_id=item.account_id,
                category=category_ref(item.category),
                is_overdue=item.is_overdue,
            )

        budget = summary.budget_analysis
        totals = summary.totals
        return cls(
            period_start=summary.window.start,
            period_end=summary.window.end,
            period_type=summary.window.period_type.value,
            mode=summary.window.mode.value,
            current_balance=float(summary.current_balance),
            current_debt=float(summary.current_debt),
            current_msi_debt=float(summary.current_msi_debt),
            expected_income=[expected(item) for item in summary.expected_income],
            expected_expenses=[expected(item) for item in summary.expected_expenses],
            msi_payments_due=[
                MsiPaymentSchema(
                    id=payment.id,
                    purchase_id=payment.purchase_id,
                    description=payment.description,
                    amount=float(payment.amount),
                    due_date=payment.due_date,
                    account_id=payment.account_id,
                    account_name=payment.account_name,
                    installment_number=payment.installment_number,
                    installment_count=payment.installment_count,
                    msi_total=float(payment.msi_total),
                    paid_amount=float(payment.paid_amount),
                    is_last_installment=payment.is_last_installment,
                    is_overdue=payment.is_overdue,
                    category=category_ref(payment.category),
                )
                for payment in summary.msi_payments_due
            ],
            msi_by_account=[
                MsiGroupSchema(
                    account_id=key.account_id,
                    due_date=key.due_date,
                    account_name=group.account_name,
                    total=float(group.total),
                    count=group.count,
                    purchase_ids=group.purchase_ids,
                )
                for key, group in sorted(summary.msi_by_account.items())
            ],
            total_expected_income=float(totals.total_expected_income),
            total_expected_expenses=float(totals.total_expected_expenses),
            total_msi_payments=float(totals.total_msi_payments),
            total_commitments=float(totals.total_commitments),
            projected_balance=float(summary.projected_balance),
            disposable_income=float(summary.disposable_income),
            net_worth=float(summary.net_worth),
            lowest_balance=float(summary.lowest_balance),
            is_sufficient=summary.is_sufficient,
            shortfall=_money(summary.shortfall),
            budget_analysis=BudgetAnalysisSchema(
                needs=BudgetBucketSchema.from_domain(budget.needs),
                wants=BudgetBucketSchema.from_domain(budget.wants),
                savings=BudgetBucketSchema.from_domain(budget.savings),
                unclassified=float(budget.unclassified),
            ),
            timeline=[
                TimelinePointSchema(
                    day=point.date,
                    inflow=float(point.inflow),
                    outflow=float(point.outflow),
                    balance=float(point.balance),
                )
                for point in summary.timeline
            ],
            alerts=[
                AlertSchema(
                    code=alert.code,
                    severity=alert.severity.value,
                    message=alert.message,
                    reference_id=alert.reference_id,
                )
                for alert in summary.alerts
            ],
            warnings=summary.warnings,
        )


class BillingCycleSchema(CamelModel):
    cycle_start: date
    cutoff_date: date
    payment_date: date
    days_until_cutoff: int
    days_until_payment: int
    is_before_cutoff: bool


class MsiChargeSchema(CamelModel):
    purchase_id: str
    description: str
    amount: float
    installment_number: int
    installment_count: int
    remaining_amount: float
    is_last_installment: bool


class StatementResponse(CamelModel):
    account_id: str
    account_name: str
    billing_cycle: BillingCycleSchema
    msi_charges: List[MsiChargeSchema]
    msi_total: float
    current_debt: float
    credit_limit: Optional[float] = None
    utilization: Optional[float] = None
    available_credit: Optional[float] = None
    minimum_payment: float
    monthly_interest: float
    payoff_months_at_minimum: Optional[int] = None
    never_pays_off: bool

    @classmethod
    def from_domain(cls, statement: StatementSummary) -> "StatementResponse":
        cycle = statement.cycle
        never_pays_off = math.isinf(statement.payoff_months_at_minimum)
        return cls(
            account_id=statement.account_id,
            account_name=statement.account_name,
            billing_cycle=BillingCycleSchema(
                cycle_start=cycle.cycle_start,
                cutoff_date=cycle.cutoff_date,
                payment_date=cycle.payment_date,
                days_until_cutoff=cycle.days_until_cutoff,
                days_until_payment=cycle.days_until_payment,
                is_before_cutoff=cycle.is_before_cutoff,
            ),
            msi_charges=[
                MsiChargeSchema(
                    purchase_id=charge.purchase_id,
                    description=charge.description,
                    amount=float(charge.amount),
                    installment_number=charge.installment_number,
                    installment_count=charge.installment_count,
                    remaining_amount=float(charge.remaining_amount),
                    is_last_installment=charge.is_last_installment,
                )
                for charge in statement.msi_charges
            ],
            msi_total=float(statement.msi_total),
            current_debt=float(statement.current_debt),
            credit_limit=_money(statement.credit_limit),
            utilization=statement.utilization,
            available_credit=_money(statement.available_credit),
            minimum_payment=statement.minimum_payment,
            monthly_interest=statement.monthly_interest,
            payoff_months_at_minimum=None if never_pays_off else int(statement.payoff_months_at_minimum),
            never_pays_off=never_pays_off,
        )


class AmortizationRowSchema(CamelModel):
    month: int
    payment: float
    principal: float
    interest: float
    balance: float


class PaymentCostSchema(CamelModel):
    months: int
    total_paid: float
    total_interest: float
    remaining_balance: float
    paid_off: bool

    @classmethod
    def from_domain(cls, cost: PaymentCost) -> "PaymentCostSchema":
        return cls(
            months=cost.months,
            total_paid=cost.total_paid,
            total_interest=cost.total_interest,
            remaining_balance=cost.remaining_balance,
            paid_off=cost.paid_off,
        )


class DebtAdvisoryResponse(CamelModel):
    """Minimum-payment advisory for one card balance"""

    balance: float
    annual_rate: float
    monthly_payment: float
    monthly_interest: float
    minimum_payment: float
    payoff_months: Optional[int] = None
    never_pays_off: bool
    minimum_payment_cost: PaymentCostSchema
    amortization_table: List[AmortizationRowSchema]

    @staticmethod
    def rows(table: List[AmortizationRow]) -> List[AmortizationRowSchema]:
        return [
            AmortizationRowSchema(
                month=row.month,
                payment=row.payment,
                principal=row.principal,
                interest=row.interest,
                balance=row.balance,
            )
            for row in table
        ]
