"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from period_planner.config import settings
from period_planner.domain.models import PeriodSummary


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured JSON logging on the root logger.

    Called once by the host application at startup. Calling it again replaces
    the JSON handler from the previous call; other handlers are left alone.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for existing in list(logger.handlers):
        if isinstance(existing.formatter, CustomJsonFormatter):
            logger.removeHandler(existing)

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_projection(
    request_id: str,
    user_id: str,
    summary: PeriodSummary,
    duration_ms: float,
) -> None:
    """Log structured projection outcome for analysis"""
    logging.info(
        "Projection completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "projection_complete",
            "period_type": summary.window.period_type.value,
            "mode": summary.window.mode.value,
            "outcome": "sufficient" if summary.is_sufficient else "insufficient",
            "shortfall": float(summary.shortfall) if summary.shortfall is not None else 0.0,
            "alert_count": len(summary.alerts),
            "duration_ms": duration_ms,
        },
    )
