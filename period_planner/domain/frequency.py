"""Frequency calendar: occurrence dates of recurring templates"""

from datetime import date, timedelta
from itertools import count
from typing import Iterator

from period_planner.domain.exceptions import UnsupportedFrequencyError
from period_planner.domain.models import Frequency, RecurringTemplate
from period_planner.utils.date_utils import add_months, add_years, end_of_month

FIXED_INTERVALS = {
    Frequency.DAILY: timedelta(days=1),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.BIWEEKLY: timedelta(days=14),
}

MONTH_STEPS = {
    Frequency.MONTHLY: 1,
    Frequency.BIMONTHLY: 2,
}


def parse_frequency(value: str | Frequency) -> Frequency:
    """Resolve a frequency string (case-insensitive) to a Frequency"""
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(str(value).lower())
    except ValueError:
        raise UnsupportedFrequencyError(f"Unsupported frequency: {value!r}") from None


def next_occurrence(current: date, frequency: Frequency) -> date:
    """
    Single step of the frequency rule from `current`.

    Semi-monthly (15/30) rule:
    - before the 15th -> the 15th of the same month
    - on the 15th -> last day of the same month
    - after the 15th -> the 15th of the next month
    """
    if frequency in FIXED_INTERVALS:
        return current + FIXED_INTERVALS[frequency]
    if frequency in MONTH_STEPS:
        return add_months(current, MONTH_STEPS[frequency])
    if frequency == Frequency.YEARLY:
        return add_years(current, 1)
    if frequency == Frequency.SEMIMONTHLY:
        if current.day < 15:
            return current.replace(day=15)
        if current.day == 15:
            return end_of_month(current)
        return add_months(current.replace(day=1), 1, day=15)
    raise UnsupportedFrequencyError(f"Unsupported frequency: {frequency!r}")


def iter_occurrences(anchor: date, frequency: Frequency, skip_before: date | None = None) -> Iterator[date]:
    """
    Endless occurrence sequence starting at `anchor`.

    Month-based frequencies are computed from the anchor (anchor + k months)
    rather than step by step, so day 31 survives a pass through February.
    `skip_before` lets fixed-interval frequencies jump straight to the first
    occurrence on or after that date.
    """
    if frequency in FIXED_INTERVALS:
        step = FIXED_INTERVALS[frequency]
        first = 0
        if skip_before is not None and skip_before > anchor:
            first = (skip_before - anchor).days // step.days
        for k in count(first):
            yield anchor + step * k
    elif frequency in MONTH_STEPS:
        for k in count():
            yield add_months(anchor, MONTH_STEPS[frequency] * k)
    elif frequency == Frequency.YEARLY:
        for k in count():
            yield add_years(anchor, k)
    elif frequency == Frequency.SEMIMONTHLY:
        current = anchor
        while True:
            yield current
            current = next_occurrence(current, frequency)
    else:
        raise UnsupportedFrequencyError(f"Unsupported frequency: {frequency!r}")


def occurrences_in_window(template: RecurringTemplate, window_start: date, window_end: date) -> Iterator[date]:
    """
    Occurrence dates of `template` inside [window_start, window_end).

    Walks forward from `template.next_due_date`; stops at the window end or
    at `template.end_date` (exclusive), whichever comes first.
    """
    end_date = template.end_date
    if template.next_due_date >= window_end:
        return
    if end_date is not None and end_date < window_start:
        return

    for occurrence in iter_occurrences(template.next_due_date, template.frequency, skip_before=window_start):
        if occurrence >= window_end:
            return
        if end_date is not None and occurrence >= end_date:
            return
        if occurrence >= window_start:
            yield occurrence
