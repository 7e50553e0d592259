"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

from period_planner.domain.models import PlanningPolicy


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "period-planner"
    log_level: str = "INFO"

    # Card terms (typical Mexican bank defaults)
    min_payment_percent: float = 0.05
    fixed_minimum_payment: float = 200.0
    minimum_cost_max_months: int = 120  # 10 years
    amortization_max_months: int = 60

    # MSI
    msi_settled_tolerance: Decimal = Decimal("0.50")

    # Alerts
    high_utilization_threshold: float = 0.80
    debt_to_cash_alert_ratio: float = 0.60
    commitments_alert_ratio: float = 0.80
    cutoff_alert_days: int = 3

    # 50/30/20 split
    needs_ratio: Decimal = Decimal("0.50")
    wants_ratio: Decimal = Decimal("0.30")
    savings_ratio: Decimal = Decimal("0.20")

    carry_overdue_occurrences: bool = True

    def planning_policy(self) -> PlanningPolicy:
        """Immutable policy handed to the domain layer"""
        return PlanningPolicy(
            min_payment_percent=self.min_payment_percent,
            fixed_minimum_payment=self.fixed_minimum_payment,
            minimum_cost_max_months=self.minimum_cost_max_months,
            amortization_max_months=self.amortization_max_months,
            msi_settled_tolerance=self.msi_settled_tolerance,
            high_utilization_threshold=self.high_utilization_threshold,
            debt_to_cash_alert_ratio=self.debt_to_cash_alert_ratio,
            commitments_alert_ratio=self.commitments_alert_ratio,
            cutoff_alert_days=self.cutoff_alert_days,
            needs_ratio=self.needs_ratio,
            wants_ratio=self.wants_ratio,
            savings_ratio=self.savings_ratio,
            carry_overdue_occurrences=self.carry_overdue_occurrences,
        )


settings = Settings()
