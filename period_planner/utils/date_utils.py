"""Date manipulation utilities (UTC calendar dates only)"""

from datetime import date, datetime, timezone

from dateutil.relativedelta import relativedelta


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day 29-31 to the month's last valid day"""
    return date(year, month, 1) + relativedelta(day=day)


def add_months(from_date: date, months: int, day: int | None = None) -> date:
    """
    Add calendar months, clamping to the target month's last day.

    `day` overrides the day-of-month to aim for, so an anchor on the 31st
    can be recovered after passing through a shorter month.
    """
    return from_date + relativedelta(months=months, day=day)


def add_years(from_date: date, years: int) -> date:
    """Add calendar years (Feb 29 becomes Feb 28 on non-leap years)"""
    return from_date + relativedelta(years=years)


def end_of_month(from_date: date) -> date:
    """Last calendar day of from_date's month"""
    return from_date + relativedelta(day=31)


def first_of_next_month(from_date: date) -> date:
    return from_date + relativedelta(months=1, day=1)


def to_utc_date(value: date | datetime) -> date:
    """
    Calendar date of a date or datetime in UTC.

    Naive datetimes are taken as already being UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative if end is earlier)"""
    return (end - start).days
