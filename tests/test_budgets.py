"""Tests for budget-vs-actual evaluation."""

from datetime import date

from finance_tracker.analytics.budgets import budget_percentage, evaluate_budgets
from finance_tracker.analytics.records import BudgetLimit

from helpers import expense, income


def limit(budget_id, category, amount, month=10, year=2026):
    return BudgetLimit(
        budget_id=budget_id,
        category_id=category,
        monthly_limit=amount,
        month=month,
        year=year,
        category_name=category.title(),
    )


TRANSACTIONS = [
    expense(80, date(2026, 10, 3), "food"),
    expense(50, date(2026, 10, 31), "food"),
    expense(500, date(2026, 9, 30), "food"),  # previous month
    expense(40, date(2026, 11, 1), "food"),  # next month
    expense(900, date(2026, 10, 1), "rent"),
    income(100, date(2026, 10, 10), "food"),
]


class TestEvaluateBudgets:
    def test_over_budget(self):
        [status] = evaluate_budgets([limit("b1", "food", 100)], TRANSACTIONS, 10, 2026)

        assert status.spent == 130
        assert status.is_over is True
        assert status.percentage == 100
        assert status.remaining == -30

    def test_under_budget(self):
        [status] = evaluate_budgets([limit("b2", "rent", 1200)], TRANSACTIONS, 10, 2026)

        assert status.spent == 900
        assert status.is_over is False
        assert status.percentage == 75
        assert status.remaining == 300

    def test_budget_without_spending(self):
        [status] = evaluate_budgets([limit("b3", "fun", 200)], TRANSACTIONS, 10, 2026)

        assert status.spent == 0
        assert status.percentage == 0
        assert status.is_over is False

    def test_only_budgeted_categories_are_reported(self):
        statuses = evaluate_budgets([limit("b1", "food", 100)], TRANSACTIONS, 10, 2026)
        assert [s.category_id for s in statuses] == ["food"]

    def test_budgets_of_other_months_are_skipped(self):
        statuses = evaluate_budgets(
            [limit("b1", "food", 100), limit("b9", "food", 100, month=9)],
            TRANSACTIONS,
            10,
            2026,
        )
        assert [s.budget_id for s in statuses] == ["b1"]

    def test_zero_limit_does_not_divide(self):
        [status] = evaluate_budgets([limit("b4", "food", 0)], TRANSACTIONS, 10, 2026)

        assert status.percentage == 0
        assert status.is_over is True

    def test_percentage_stays_in_range(self):
        for spent, amount in [(0, 10), (5, 10), (10, 10), (1000, 10), (5, 0)]:
            assert 0 <= budget_percentage(spent, amount) <= 100
        assert budget_percentage(5, 0) == 0
