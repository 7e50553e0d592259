"""Entry points for the API layer: validate a snapshot, run the engine, serialize"""

import logging
import math
import time
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from period_planner.config import settings
from period_planner.domain.exceptions import InvalidSnapshotError
from period_planner.domain.interest import (
    amortization_table,
    minimum_payment,
    minimum_payment_cost,
    monthly_interest,
    payoff_months,
)
from period_planner.domain.models import PlanningPolicy
from period_planner.domain.projection import project_period
from period_planner.domain.statements import build_statement
from period_planner.infrastructure.observability.logging import log_projection
from period_planner.infrastructure.observability.metrics import (
    invalid_snapshot_counter,
    projection_duration_histogram,
    record_projection,
)
from period_planner.schemas import (
    DebtAdvisoryResponse,
    PaymentCostSchema,
    PeriodRequest,
    PeriodSummaryResponse,
    StatementResponse,
)


def parse_request(payload: Dict[str, Any] | PeriodRequest) -> PeriodRequest:
    """Validate a raw snapshot payload"""
    if isinstance(payload, PeriodRequest):
        return payload
    try:
        return PeriodRequest.model_validate(payload)
    except ValidationError as e:
        invalid_snapshot_counter.inc()
        logging.warning(f"Invalid snapshot: {e.error_count()} validation errors")
        raise InvalidSnapshotError(str(e)) from e


def build_period_summary(
    payload: Dict[str, Any] | PeriodRequest,
    request_id: Optional[str] = None,
    user_id: str = "unknown",
    policy: Optional[PlanningPolicy] = None,
) -> Dict[str, Any]:
    """
    Build the period summary for one user snapshot.

    Flow:
    1. Validate the payload and convert it to domain objects
    2. Project the period
    3. Record metrics and logs
    4. Return a JSON-ready camelCase record
    """
    start_time = time.time()
    request_id = request_id or str(uuid.uuid4())
    request = parse_request(payload)

    with projection_duration_histogram.time():
        summary = project_period(
            request.period_type,
            request.mode,
            request.today,
            accounts=[account.to_domain() for account in request.accounts],
            templates=[template.to_domain() for template in request.recurring_templates],
            purchases=[purchase.to_domain() for purchase in request.installment_purchases],
            categories=[category.to_domain() for category in request.categories],
            policy=policy or settings.planning_policy(),
        )

    duration_ms = (time.time() - start_time) * 1000
    record_projection(summary)
    log_projection(request_id, user_id, summary, duration_ms)

    return PeriodSummaryResponse.from_domain(summary).model_dump(by_alias=True, mode="json")


def build_statements(
    payload: Dict[str, Any] | PeriodRequest,
    policy: Optional[PlanningPolicy] = None,
) -> List[Dict[str, Any]]:
    """Statement summaries for every credit card with a configured cycle"""
    request = parse_request(payload)
    policy = policy or settings.planning_policy()
    purchases = [purchase.to_domain() for purchase in request.installment_purchases]

    statements = []
    for schema in request.accounts:
        statement = build_statement(schema.to_domain(), purchases, request.today, policy)
        if statement is None:
            continue
        statements.append(StatementResponse.from_domain(statement).model_dump(by_alias=True, mode="json"))
    return statements


def debt_advisory(
    balance: float,
    annual_rate: float,
    monthly_payment: Optional[float] = None,
    policy: Optional[PlanningPolicy] = None,
) -> Dict[str, Any]:
    """
    What paying a card balance down looks like.

    Uses the minimum payment when no monthly payment is given.
    """
    policy = policy or settings.planning_policy()
    minimum = minimum_payment(balance, policy.min_payment_percent, policy.fixed_minimum_payment)
    payment = monthly_payment if monthly_payment is not None else minimum
    months = payoff_months(balance, annual_rate, payment)
    cost = minimum_payment_cost(
        balance,
        annual_rate,
        min_payment_percent=policy.min_payment_percent,
        max_months=policy.minimum_cost_max_months,
        fixed_minimum=policy.fixed_minimum_payment,
    )
    table = amortization_table(balance, annual_rate, payment, max_months=policy.amortization_max_months)

    response = DebtAdvisoryResponse(
        balance=balance,
        annual_rate=annual_rate,
        monthly_payment=payment,
        monthly_interest=monthly_interest(balance, annual_rate),
        minimum_payment=minimum,
        payoff_months=None if math.isinf(months) else int(months),
        never_pays_off=math.isinf(months),
        minimum_payment_cost=PaymentCostSchema.from_domain(cost),
        amortization_table=DebtAdvisoryResponse.rows(table),
    )
    return response.model_dump(by_alias=True, mode="json")
