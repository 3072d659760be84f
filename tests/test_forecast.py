"""Tests for the trailing-average baseline and the month projection."""

from datetime import date

from finance_tracker.analytics.aggregation import MonthlyTotals, monthly_rollup
from finance_tracker.analytics.forecast import forecast_expenses, project_month_total

from helpers import expense, income

TODAY = date(2026, 9, 10)


def history():
    return [
        expense(600, date(2026, 6, 12)),
        expense(600, date(2026, 7, 3)),
        expense(900, date(2026, 8, 20)),
        expense(300, date(2026, 9, 4)),
        income(3000, date(2026, 6, 1)),
        income(3000, date(2026, 7, 1)),
        income(3300, date(2026, 8, 1)),
        income(3100, date(2026, 9, 1)),
    ]


class TestProjection:
    def test_linear_projection(self):
        # 300 spent by day 10 of a 30-day month
        assert project_month_total(300, 10, 30) == 900

    def test_day_zero_projects_nothing(self):
        assert project_month_total(300, 0, 30) == 0


class TestForecastExpenses:
    def test_projection_and_trailing_average(self):
        forecast = forecast_expenses(monthly_rollup(history(), 4, TODAY), TODAY)

        assert forecast.month == "2026-09"
        assert forecast.projected_expenses == 900
        assert forecast.current_month_expenses == 300
        assert forecast.current_month_income == 3100
        assert forecast.avg_monthly_expenses == 700
        assert forecast.avg_monthly_income == 3100

    def test_over_pace(self):
        forecast = forecast_expenses(monthly_rollup(history(), 4, TODAY), TODAY)

        assert forecast.over_pace is True
        assert forecast.overage_percent == 29

    def test_only_last_three_complete_months_are_averaged(self):
        feed = history() + [expense(10000, date(2026, 5, 15))]
        forecast = forecast_expenses(monthly_rollup(feed, 6, TODAY), TODAY)

        assert forecast.avg_monthly_expenses == 700

    def test_no_history_has_zero_baseline(self):
        forecast = forecast_expenses(monthly_rollup([expense(300, TODAY)], 1, TODAY), TODAY)

        assert forecast.avg_monthly_expenses == 0
        assert forecast.projected_expenses == 900
        assert forecast.over_pace is False
        assert forecast.overage_percent is None

    def test_past_month_counts_as_complete(self):
        rollup = [MonthlyTotals(month="2026-06", label="Jun 26", expenses=450, income=0)]
        forecast = forecast_expenses(rollup, TODAY)

        assert forecast.projected_expenses == 450

    def test_empty_rollup(self):
        assert forecast_expenses([], TODAY) is None
