"""Next-occurrence arithmetic for recurrence rules.

Everything here is a pure function of its arguments: same (anchor, rule,
today) in, same date out. Weekly, monthly and annual results are always
strictly after `today`; a single rule just hands back its anchor.
"""
from datetime import date, timedelta

from models.recurrence_rule import (
    RecurrenceRule, Single, Weekly, Biweekly, Monthly, Annual,
)
from utils.date_helpers import clamped_date, next_month


def next_occurrence(anchor: date | None, rule: RecurrenceRule, today: date) -> date | None:
    """Return the next date `rule` falls on after `today`.

    `anchor` is the stored due/start date. It is the answer for Single rules
    and aligns the fortnight for Biweekly rules; other rules ignore it.
    """
    if isinstance(rule, Single):
        return anchor
    if isinstance(rule, Weekly):
        return _next_weekday(rule.weekday, today)
    if isinstance(rule, Biweekly):
        return _next_biweekly(anchor, rule.weekday, today)
    if isinstance(rule, Monthly):
        return _next_monthly(rule.day, today)
    if isinstance(rule, Annual):
        return _next_annual(rule.month, rule.day, today)
    raise TypeError(f"Unsupported recurrence rule: {rule!r}")


def first_on_or_after(anchor: date | None, rule: RecurrenceRule, start: date) -> date | None:
    """First occurrence on or after `start` (used when a record's start date is
    in the future)."""
    return next_occurrence(anchor, rule, start - timedelta(days=1))


def _next_weekday(weekday: int, today: date) -> date:
    days_ahead = (weekday - today.isoweekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return today + timedelta(days=days_ahead)


def _next_biweekly(anchor: date | None, weekday: int, today: date) -> date:
    if anchor is None:
        return _next_weekday(weekday, today)
    # First date >= anchor on the target weekday starts the 14-day series.
    series_start = anchor + timedelta(days=(weekday - anchor.isoweekday()) % 7)
    if series_start > today:
        return series_start
    periods = (today - series_start).days // 14 + 1
    return series_start + timedelta(days=14 * periods)


def _next_monthly(day: int, today: date) -> date:
    candidate = clamped_date(today.year, today.month, day)
    if candidate > today:
        return candidate
    y, m = next_month(today.year, today.month)
    return clamped_date(y, m, day)


def _next_annual(month: int, day: int, today: date) -> date:
    candidate = clamped_date(today.year, month, day)
    if candidate > today:
        return candidate
    return clamped_date(today.year + 1, month, day)


def occurrences_between(
    anchor: date | None, rule: RecurrenceRule, start: date, end: date
) -> list[date]:
    """All dates in [start, end] the rule falls on, in order."""
    if isinstance(rule, Single):
        return [anchor] if anchor and start <= anchor <= end else []
    found = []
    current = first_on_or_after(anchor, rule, start)
    while current is not None and current <= end:
        found.append(current)
        current = next_occurrence(anchor, rule, current)
    return found
