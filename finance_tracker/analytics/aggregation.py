"""Monthly and per-category rollups over a transaction feed."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .money import round_money
from .periods import last_month_keys, month_key, month_label
from .records import TransactionRecord

logger = structlog.get_logger()


@dataclass(frozen=True)
class MonthlyTotals:
    month: str
    label: str
    expenses: float
    income: float


@dataclass(frozen=True)
class CategoryTotal:
    category_id: Any
    name: str
    icon: str
    total: float


@dataclass(frozen=True)
class PeriodSummary:
    total_income: float
    total_expenses: float
    balance: float
    transaction_count: int


def monthly_rollup(
    transactions: Iterable[TransactionRecord],
    months: int,
    today: Optional[date] = None,
) -> List[MonthlyTotals]:
    """
    Bucket income and expenses into the last ``months`` calendar months.

    Every month of the window is present, oldest first, with zero totals
    when nothing happened in it. Transactions outside the window are ignored.

    Args:
        transactions: Records already scoped to one user and one currency.
        months: Window size; the window ends with the current month.
        today: Reference date, defaults to ``date.today()``.
    """
    keys = last_month_keys(months, today)
    expenses: Dict[str, float] = {key: 0.0 for key in keys}
    income: Dict[str, float] = {key: 0.0 for key in keys}

    for t in transactions:
        key = month_key(t.date)
        if key not in expenses:
            continue
        if t.is_income:
            income[key] += t.amount
        else:
            expenses[key] += t.amount

    rollup = [
        MonthlyTotals(
            month=key,
            label=month_label(key),
            expenses=round_money(expenses[key]),
            income=round_money(income[key]),
        )
        for key in keys
    ]
    logger.debug("monthly_rollup_computed", months=months, first=keys[0] if keys else None)
    return rollup


def category_totals(
    transactions: Iterable[TransactionRecord],
    window_start: date,
    window_end: date,
) -> Dict[Any, CategoryTotal]:
    """Unrounded expense totals per category for ``window_start <= date <= window_end``."""
    sums: Dict[Any, float] = {}
    meta: Dict[Any, TransactionRecord] = {}
    for t in transactions:
        if not t.is_expense or t.date < window_start or t.date > window_end:
            continue
        if t.category_id not in sums:
            sums[t.category_id] = 0.0
            meta[t.category_id] = t
        sums[t.category_id] += t.amount

    return {
        category_id: CategoryTotal(
            category_id=category_id,
            name=meta[category_id].category_name,
            icon=meta[category_id].category_icon,
            total=total,
        )
        for category_id, total in sums.items()
    }


def category_breakdown(
    transactions: Iterable[TransactionRecord],
    window_start: date,
    window_end: date,
) -> List[CategoryTotal]:
    """Expense totals per category in the window, largest first, rounded to cents."""
    totals = category_totals(transactions, window_start, window_end)
    rounded = [
        CategoryTotal(
            category_id=c.category_id,
            name=c.name,
            icon=c.icon,
            total=round_money(c.total),
        )
        for c in totals.values()
    ]
    # sorted() is stable, equal totals keep feed order
    return sorted(rounded, key=lambda c: c.total, reverse=True)


def period_summary(transactions: Iterable[TransactionRecord]) -> PeriodSummary:
    total_income = 0.0
    total_expenses = 0.0
    count = 0
    for t in transactions:
        count += 1
        if t.is_income:
            total_income += t.amount
        else:
            total_expenses += t.amount

    return PeriodSummary(
        total_income=round_money(total_income),
        total_expenses=round_money(total_expenses),
        balance=round_money(total_income - total_expenses),
        transaction_count=count,
    )
