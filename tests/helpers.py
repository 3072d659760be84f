"""Record and date builders shared by the tests."""

from datetime import date
from itertools import count

from finance_tracker.analytics.periods import shift_month
from finance_tracker.analytics.records import EXPENSE, INCOME, TransactionRecord

_ids = count(1)

CATEGORIES = {
    "food": ("Food", "🍔"),
    "rent": ("Rent", "🏠"),
    "fun": ("Entertainment", "🎬"),
    "salary": ("Salary", "💰"),
}


def record(amount, when, type=EXPENSE, category="food", description=None, account="acc-1"):
    name, icon = CATEGORIES.get(category, (category, ""))
    return TransactionRecord(
        id=next(_ids),
        amount=amount,
        type=type,
        date=when,
        category_id=category,
        account_id=account,
        description=description,
        category_name=name,
        category_icon=icon,
    )


def expense(amount, when, category="food", description=None, account="acc-1"):
    return record(amount, when, EXPENSE, category, description, account)


def income(amount, when, category="salary", description=None, account="acc-1"):
    return record(amount, when, INCOME, category, description, account)


def last_month_day(day=15):
    today = date.today()
    year, month = shift_month(today.year, today.month, -1)
    return date(year, month, day)
