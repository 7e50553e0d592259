"""Domain models - pure Python dataclasses representing planning entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, NamedTuple, Optional


class AccountType(str, Enum):
    CHECKING = "checking"  # debit / payroll accounts
    CASH = "cash"
    CREDIT = "credit"
    LOAN = "loan"
    INVESTMENT = "investment"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "biweekly_15_30"  # 15th and month-end payroll
    MONTHLY = "monthly"
    BIMONTHLY = "bimonthly"
    YEARLY = "yearly"


class BudgetType(str, Enum):
    NEED = "need"
    WANT = "want"
    SAVINGS = "savings"


class PeriodType(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    BIMONTHLY = "bimonthly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


class ProjectionMode(str, Enum):
    CALENDAR = "calendar"
    PROJECTION = "projection"


class AlertSeverity(str, Enum):
    WARNING = "warning"
    INFO = "info"


LIQUID_ACCOUNT_TYPES = (AccountType.CHECKING, AccountType.CASH)


@dataclass(frozen=True)
class PlanningPolicy:
    """Tunable thresholds and per-bank terms used by the engine"""

    min_payment_percent: float = 0.05
    fixed_minimum_payment: float = 200.0
    minimum_cost_max_months: int = 120
    amortization_max_months: int = 60
    msi_settled_tolerance: Decimal = Decimal("0.50")
    high_utilization_threshold: float = 0.80
    debt_to_cash_alert_ratio: float = 0.60
    commitments_alert_ratio: float = 0.80
    cutoff_alert_days: int = 3
    needs_ratio: Decimal = Decimal("0.50")
    wants_ratio: Decimal = Decimal("0.30")
    savings_ratio: Decimal = Decimal("0.20")
    carry_overdue_occurrences: bool = True


@dataclass
class Account:
    """Account snapshot; for credit accounts `balance` is debt owed"""

    id: str
    name: str
    type: AccountType
    balance: Decimal
    credit_limit: Optional[Decimal] = None
    cutoff_day: Optional[int] = None
    payment_day: Optional[int] = None
    annual_interest_rate: Optional[float] = None

    @property
    def is_credit(self) -> bool:
        return self.type == AccountType.CREDIT

    @property
    def has_billing_cycle(self) -> bool:
        return bool(self.cutoff_day) and bool(self.payment_day)


@dataclass
class Category:
    id: str
    name: str
    type: TransactionType
    budget_type: Optional[BudgetType] = None


@dataclass
class RecurringTemplate:
    """
    Recurring income/expense definition.

    `next_due_date` is trusted as the next unconsumed occurrence.
    """

    id: str
    amount: Decimal
    description: str
    type: TransactionType
    frequency: Frequency
    account_id: str
    next_due_date: date
    category_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    active: bool = True


@dataclass
class InstallmentPurchase:
    """Interest-free (MSI) purchase split into equal monthly installments"""

    id: str
    description: str
    total_amount: Decimal
    installment_count: int
    purchase_date: date
    account_id: str
    paid_installment_count: int = 0
    paid_amount: Decimal = Decimal("0")
    category_id: Optional[str] = None
    monthly_payment: Optional[Decimal] = None

    @property
    def remaining_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount


@dataclass
class Installment:
    """Single installment of an MSI purchase"""

    installment_number: int
    due_date: date
    amount: Decimal
    is_last_installment: bool


@dataclass
class BillingCycle:
    cycle_start: date
    cutoff_date: date
    payment_date: date
    days_until_cutoff: int
    days_until_payment: int
    is_before_cutoff: bool


@dataclass
class AmortizationRow:
    month: int
    payment: float
    principal: float
    interest: float
    balance: float


@dataclass
class PaymentCost:
    """Outcome of simulating minimum-only payments"""

    months: int
    total_paid: float
    total_interest: float
    remaining_balance: float = 0.0

    @property
    def paid_off(self) -> bool:
        return self.remaining_balance <= 0


@dataclass
class PeriodWindow:
    """Half-open [start, end) date window"""

    start: date
    end: date
    period_type: PeriodType
    mode: ProjectionMode


@dataclass
class ExpectedItem:
    """Recurring income/expense occurrence inside the window"""

    id: str
    template_id: str
    description: str
    amount: Decimal
    due_date: date
    type: TransactionType
    account_id: str
    category: Optional[Category] = None
    is_overdue: bool = False


@dataclass
class MsiPayment:
    """Installment occurrence inside the window"""

    id: str
    purchase_id: str
    description: str
    amount: Decimal
    due_date: date
    account_id: str
    account_name: str
    installment_number: int
    installment_count: int
    msi_total: Decimal
    paid_amount: Decimal
    is_last_installment: bool
    category: Optional[Category] = None
    is_overdue: bool = False
    is_msi: bool = True


class MsiGroupKey(NamedTuple):
    account_id: str
    due_date: date


@dataclass
class MsiGroup:
    account_name: str
    total: Decimal = Decimal("0")
    count: int = 0
    purchase_ids: List[str] = field(default_factory=list)


@dataclass
class BudgetBucket:
    projected: Decimal
    ideal: Decimal

    @property
    def difference(self) -> Decimal:
        return self.ideal - self.projected


@dataclass
class BudgetAnalysis:
    needs: BudgetBucket
    wants: BudgetBucket
    savings: BudgetBucket
    unclassified: Decimal = Decimal("0")


@dataclass
class TimelinePoint:
    date: date
    inflow: Decimal
    outflow: Decimal
    balance: Decimal


@dataclass
class Alert:
    code: str
    severity: AlertSeverity
    message: str
    reference_id: Optional[str] = None


@dataclass
class PeriodTotals:
    total_expected_income: Decimal
    total_expected_expenses: Decimal
    total_msi_payments: Decimal

    @property
    def total_commitments(self) -> Decimal:
        return self.total_expected_expenses + self.total_msi_payments


@dataclass
class PeriodSummary:
    """Output of the projection engine (not persisted)"""

    window: PeriodWindow
    today: date
    current_balance: Decimal
    current_debt: Decimal
    current_msi_debt: Decimal
    expected_income: List[ExpectedItem]
    expected_expenses: List[ExpectedItem]
    msi_payments_due: List[MsiPayment]
    totals: PeriodTotals
    projected_balance: Decimal
    net_worth: Decimal
    is_sufficient: bool
    shortfall: Optional[Decimal]
    budget_analysis: BudgetAnalysis
    timeline: List[TimelinePoint]
    lowest_balance: Decimal
    msi_by_account: Dict[MsiGroupKey, MsiGroup]
    alerts: List[Alert]

    @property
    def disposable_income(self) -> Decimal:
        return self.projected_balance

    @property
    def warnings(self) -> List[str]:
        return [alert.message for alert in self.alerts]


@dataclass
class MsiCharge:
    """MSI installment billed within a card's statement cycle"""

    purchase_id: str
    description: str
    amount: Decimal
    installment_number: int
    installment_count: int
    remaining_amount: Decimal
    is_last_installment: bool


@dataclass
class StatementSummary:
    account_id: str
    account_name: str
    cycle: BillingCycle
    msi_charges: List[MsiCharge]
    msi_total: Decimal
    current_debt: Decimal
    credit_limit: Optional[Decimal]
    utilization: Optional[float]
    available_credit: Optional[Decimal]
    minimum_payment: float
    monthly_interest: float
    payoff_months_at_minimum: float
