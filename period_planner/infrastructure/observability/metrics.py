"""Prometheus metrics for monitoring projection outcomes and alert volume"""

from prometheus_client import Counter, Histogram

from period_planner.domain.models import PeriodSummary

# Projection metrics
projection_counter = Counter(
    "period_projection_total",
    "Total period projections computed",
    ["period_type", "outcome"],  # sufficient | insufficient
)

shortfall_bucket_counter = Counter(
    "period_projection_shortfall_bucket",
    "Projected shortfalls by bucket",
    ["bucket"],  # $0, $0-$1k, $1k-$10k, $10k+
)

alert_counter = Counter(
    "period_alert_total",
    "Alerts emitted by projections",
    ["code"],
)

projection_duration_histogram = Histogram(
    "period_projection_duration_seconds",
    "Time spent building a period summary",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Input validation
invalid_snapshot_counter = Counter(
    "invalid_snapshot_total",
    "Payloads rejected by schema validation",
)


def shortfall_bucket(summary: PeriodSummary) -> str:
    shortfall = summary.shortfall or 0
    if shortfall == 0:
        return "$0"
    elif shortfall <= 1_000:
        return "$0-$1k"
    elif shortfall <= 10_000:
        return "$1k-$10k"
    else:
        return "$10k+"


def record_projection(summary: PeriodSummary) -> None:
    """Record projection metrics for monitoring sufficiency rates and alert mix"""
    outcome = "sufficient" if summary.is_sufficient else "insufficient"
    projection_counter.labels(period_type=summary.window.period_type.value, outcome=outcome).inc()
    shortfall_bucket_counter.labels(bucket=shortfall_bucket(summary)).inc()

    for alert in summary.alerts:
        alert_counter.labels(code=alert.code).inc()
