from datetime import date, timedelta

import pytest

from models.recurrence_rule import Single, Weekly, Biweekly, Monthly, Annual
from services.recurrence import next_occurrence, first_on_or_after, occurrences_between


class TestSingle:
    def test_returns_anchor_unchanged(self):
        anchor = date(2024, 5, 17)
        assert next_occurrence(anchor, Single(), date(2024, 1, 1)) == anchor

    def test_past_anchor_is_not_rolled(self):
        anchor = date(2023, 5, 17)
        assert next_occurrence(anchor, Single(), date(2024, 1, 1)) == anchor

    def test_missing_anchor_returns_none(self):
        assert next_occurrence(None, Single(), date(2024, 1, 1)) is None


class TestWeekly:
    # 2024-03-06 is a Wednesday (ISO weekday 3)
    TODAY = date(2024, 3, 6)

    def test_same_weekday_advances_a_full_week(self):
        assert next_occurrence(None, Weekly(3), self.TODAY) == self.TODAY + timedelta(days=7)

    @pytest.mark.parametrize("weekday, expected", [
        (4, date(2024, 3, 7)),
        (5, date(2024, 3, 8)),
        (7, date(2024, 3, 10)),
        (1, date(2024, 3, 11)),
        (2, date(2024, 3, 12)),
    ])
    def test_soonest_matching_weekday(self, weekday, expected):
        assert next_occurrence(None, Weekly(weekday), self.TODAY) == expected

    def test_never_returns_today(self):
        start = date(2024, 1, 1)
        for offset in range(14):
            today = start + timedelta(days=offset)
            result = next_occurrence(None, Weekly(today.isoweekday()), today)
            assert result == today + timedelta(days=7)


class TestBiweekly:
    ANCHOR = date(2024, 3, 4)  # Monday

    def test_anchor_in_future_is_first_occurrence(self):
        assert next_occurrence(self.ANCHOR, Biweekly(1), date(2024, 3, 1)) == self.ANCHOR

    def test_on_anchor_day_skips_to_next_fortnight(self):
        assert next_occurrence(self.ANCHOR, Biweekly(1), self.ANCHOR) == date(2024, 3, 18)

    def test_mid_period(self):
        assert next_occurrence(self.ANCHOR, Biweekly(1), date(2024, 3, 10)) == date(2024, 3, 18)
        assert next_occurrence(self.ANCHOR, Biweekly(1), date(2024, 3, 18)) == date(2024, 4, 1)

    def test_aligns_to_weekday_after_anchor(self):
        # Anchor Monday, target Friday: series starts 2024-03-08
        assert next_occurrence(self.ANCHOR, Biweekly(5), date(2024, 3, 9)) == date(2024, 3, 22)

    def test_without_anchor_behaves_weekly(self):
        assert next_occurrence(None, Biweekly(3), date(2024, 3, 6)) == date(2024, 3, 13)


class TestMonthly:
    def test_day_31_in_leap_february(self):
        assert next_occurrence(date(2024, 1, 31), Monthly(31), date(2024, 2, 1)) == date(2024, 2, 29)

    def test_day_31_in_common_february(self):
        assert next_occurrence(date(2023, 1, 31), Monthly(31), date(2023, 2, 1)) == date(2023, 2, 28)

    def test_day_31_in_30_day_month(self):
        assert next_occurrence(None, Monthly(31), date(2024, 4, 10)) == date(2024, 4, 30)

    def test_candidate_today_rolls_to_next_month(self):
        assert next_occurrence(None, Monthly(15), date(2024, 3, 15)) == date(2024, 4, 15)

    def test_rolls_over_year_end_and_clamps_again(self):
        assert next_occurrence(None, Monthly(31), date(2024, 12, 31)) == date(2025, 1, 31)
        assert next_occurrence(None, Monthly(30), date(2025, 1, 30)) == date(2025, 2, 28)

    def test_clamped_candidate_already_passed(self):
        # Feb 29 is the clamped day-30 candidate; on Feb 29 itself roll to Mar 30
        assert next_occurrence(None, Monthly(30), date(2024, 2, 29)) == date(2024, 3, 30)


class TestAnnual:
    def test_feb_29_on_common_year_clamps(self):
        assert next_occurrence(None, Annual(2, 29), date(2023, 1, 10)) == date(2023, 2, 28)

    def test_feb_29_passed_rolls_to_leap_year(self):
        assert next_occurrence(None, Annual(2, 29), date(2023, 3, 1)) == date(2024, 2, 29)

    def test_later_this_year(self):
        assert next_occurrence(None, Annual(12, 25), date(2024, 3, 1)) == date(2024, 12, 25)

    def test_today_rolls_to_next_year(self):
        assert next_occurrence(None, Annual(3, 1), date(2024, 3, 1)) == date(2025, 3, 1)


def test_is_deterministic():
    args = (date(2024, 1, 31), Monthly(31), date(2024, 2, 1))
    assert next_occurrence(*args) == next_occurrence(*args)


def test_first_on_or_after_includes_start():
    assert first_on_or_after(None, Monthly(15), date(2024, 3, 15)) == date(2024, 3, 15)
    assert first_on_or_after(None, Weekly(5), date(2024, 3, 8)) == date(2024, 3, 8)


def test_rejects_unknown_rule():
    with pytest.raises(TypeError):
        next_occurrence(None, "monthly", date(2024, 1, 1))


class TestOccurrencesBetween:
    def test_weekly_window(self):
        assert occurrences_between(None, Weekly(1), date(2024, 3, 1), date(2024, 3, 31)) == [
            date(2024, 3, 4), date(2024, 3, 11), date(2024, 3, 18), date(2024, 3, 25),
        ]

    def test_bounds_are_inclusive(self):
        assert occurrences_between(None, Monthly(10), date(2024, 3, 10), date(2024, 4, 10)) == [
            date(2024, 3, 10), date(2024, 4, 10),
        ]

    def test_single(self):
        window = (date(2024, 3, 1), date(2024, 3, 10))
        assert occurrences_between(date(2024, 3, 5), Single(), *window) == [date(2024, 3, 5)]
        assert occurrences_between(date(2024, 3, 11), Single(), *window) == []
        assert occurrences_between(None, Single(), *window) == []

    def test_biweekly_follows_anchor(self):
        anchor = date(2024, 3, 1)
        assert occurrences_between(anchor, Biweekly(5), date(2024, 3, 1), date(2024, 3, 31)) == [
            date(2024, 3, 1), date(2024, 3, 15), date(2024, 3, 29),
        ]

    def test_empty_window(self):
        assert occurrences_between(None, Monthly(20), date(2024, 3, 1), date(2024, 3, 10)) == []
