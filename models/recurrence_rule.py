"""Closed set of recurrence rules.

A rule is one of Single, Weekly, Biweekly, Monthly or Annual. Weekdays are
ISO numbered (1 = Monday .. 7 = Sunday). Every constructor validates its
fields, so a rule that exists is always in range.
"""
from dataclasses import dataclass
from typing import Union

from utils.constants import DAYS_OF_WEEK
from utils.date_helpers import days_in_month
from utils.errors import ValidationError

# Leap year used to decide whether (month, day) can ever exist.
_LEAP_YEAR = 2024


def _check_range(name: str, value, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}.")
    if not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}.")
    return value


@dataclass(frozen=True)
class Single:
    kind = "single"


@dataclass(frozen=True)
class Weekly:
    weekday: int
    kind = "weekly"

    def __post_init__(self):
        _check_range("Weekday", self.weekday, 1, 7)


@dataclass(frozen=True)
class Biweekly:
    weekday: int
    kind = "biweekly"

    def __post_init__(self):
        _check_range("Weekday", self.weekday, 1, 7)


@dataclass(frozen=True)
class Monthly:
    day: int
    kind = "monthly"

    def __post_init__(self):
        _check_range("Day", self.day, 1, 31)


@dataclass(frozen=True)
class Annual:
    month: int
    day: int
    kind = "annual"

    def __post_init__(self):
        _check_range("Month", self.month, 1, 12)
        _check_range("Day", self.day, 1, days_in_month(_LEAP_YEAR, self.month))


RecurrenceRule = Union[Single, Weekly, Biweekly, Monthly, Annual]

RECURRENCE_KINDS = ("single", "weekly", "biweekly", "monthly", "annual")


def rule_from_columns(
    kind: str,
    weekday: int | None = None,
    day: int | None = None,
    month: int | None = None,
) -> RecurrenceRule:
    """Build a rule from its persisted columns (or form fields)."""
    if kind == "single":
        return Single()
    if kind == "weekly":
        return Weekly(weekday)
    if kind == "biweekly":
        return Biweekly(weekday)
    if kind == "monthly":
        return Monthly(day)
    if kind == "annual":
        return Annual(month, day)
    raise ValidationError(
        f"Invalid recurrence '{kind}'. Must be one of: {', '.join(RECURRENCE_KINDS)}."
    )


def rule_to_columns(rule: RecurrenceRule) -> dict:
    """Inverse of rule_from_columns: {kind, weekday, day, month}."""
    columns = {"kind": rule.kind, "weekday": None, "day": None, "month": None}
    if isinstance(rule, (Weekly, Biweekly)):
        columns["weekday"] = rule.weekday
    elif isinstance(rule, Monthly):
        columns["day"] = rule.day
    elif isinstance(rule, Annual):
        columns["day"] = rule.day
        columns["month"] = rule.month
    elif not isinstance(rule, Single):
        raise ValidationError(f"Unknown recurrence rule: {rule!r}")
    return columns


def rule_from_row(row) -> RecurrenceRule:
    return rule_from_columns(
        row["recurrence"], row["rec_weekday"], row["rec_day"], row["rec_month"]
    )


def describe(rule: RecurrenceRule) -> str:
    """Short human label, e.g. 'Monthly on day 31'."""
    if isinstance(rule, Weekly):
        return f"Weekly on {DAYS_OF_WEEK[rule.weekday - 1]}"
    if isinstance(rule, Biweekly):
        return f"Every 2 weeks on {DAYS_OF_WEEK[rule.weekday - 1]}"
    if isinstance(rule, Monthly):
        return f"Monthly on day {rule.day}"
    if isinstance(rule, Annual):
        return f"Yearly on {rule.month:02d}-{rule.day:02d}"
    return "One-time"
