"""Tests for the frequency catalogue."""

import pytest

from app.planner.exceptions import InvalidInputError
from app.planner.frequencies import list_patterns, resolve_rule, try_resolve_rule
from app.planner.models import RecurrencePattern


class TestResolveRule:
    def test_daily(self):
        rule = resolve_rule("daily")
        assert rule.pattern == RecurrencePattern.daily
        assert rule.interval == 1

    def test_case_and_spaces(self):
        rule = resolve_rule("  Every Other Day ")
        assert rule.pattern == RecurrencePattern.every_n_days
        assert rule.interval == 2

    def test_every_n_days_with_dashes(self):
        rule = resolve_rule("every-3-days")
        assert rule.pattern == RecurrencePattern.every_n_days
        assert rule.interval == 3

    def test_every_one_day_is_daily(self):
        assert resolve_rule("every_1_day").pattern == RecurrencePattern.daily

    def test_every_n_weeks(self):
        rule = resolve_rule("every_2_weeks")
        assert rule.pattern == RecurrencePattern.weekly
        assert rule.interval == 2

    def test_every_n_months(self):
        rule = resolve_rule("every_6_months")
        assert rule.pattern == RecurrencePattern.monthly
        assert rule.interval == 6

    def test_biweekly(self):
        assert resolve_rule("biweekly").interval == 2

    def test_weekly_on_weekday(self):
        rule = resolve_rule("weekly_friday")
        assert rule.pattern == RecurrencePattern.weekly
        assert rule.weekday == 4

    def test_monthly_on_day(self):
        rule = resolve_rule("monthly_31")
        assert rule.pattern == RecurrencePattern.monthly
        assert rule.day_of_month == 31

    @pytest.mark.parametrize("name", ["hourly", "", "monthly_32", "monthly_0", "every_0_days", "weekly_funday"])
    def test_unrecognized(self, name):
        with pytest.raises(InvalidInputError):
            resolve_rule(name)


class TestCatalogue:
    def test_try_resolve_unknown(self):
        assert try_resolve_rule("hourly") is None

    def test_try_resolve_known(self):
        assert try_resolve_rule("weekly") is not None

    def test_patterns_listed(self):
        names = list_patterns()
        assert "daily" in names
        assert "weekly" in names
        assert "monthly" in names

    def test_every_listed_pattern_resolves(self):
        for name in list_patterns():
            assert resolve_rule(name) is not None
