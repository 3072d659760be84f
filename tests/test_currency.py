from datetime import date

from finance_tracker.analytics.currency import partition_by_currency

from helpers import expense, income

TODAY = date(2026, 10, 18)


def test_partition_keeps_currencies_apart():
    feed = [
        expense(10, TODAY, account="ron-1"),
        expense(20, TODAY, account="eur-1"),
        income(30, TODAY, account="ron-2"),
        expense(40, TODAY, account="unknown"),
    ]
    groups = partition_by_currency(feed, {"ron-1": "RON", "eur-1": "EUR", "ron-2": "RON"})

    assert list(groups) == ["RON", "EUR"]
    assert [t.amount for t in groups["RON"]] == [10, 30]
    assert [t.amount for t in groups["EUR"]] == [20]


def test_currency_without_transactions_is_empty():
    groups = partition_by_currency([], {"a": "USD"})
    assert groups == {"USD": []}
