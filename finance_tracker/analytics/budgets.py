"""Budget-vs-actual evaluation for one calendar month."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import structlog

from .money import round_money
from .periods import month_bounds
from .records import BudgetLimit, TransactionRecord

logger = structlog.get_logger()


@dataclass(frozen=True)
class BudgetStatus:
    budget_id: Any
    category_id: Any
    category_name: str
    category_icon: str
    month: int
    year: int
    limit: float
    spent: float
    remaining: float
    is_over: bool
    percentage: float


def budget_percentage(spent: float, limit: float) -> float:
    """Share of the limit used, capped at 100; 0 for a zero limit."""
    if limit <= 0:
        return 0.0
    return round_money(min(spent / limit * 100, 100.0))


def evaluate_budgets(
    budgets: Iterable[BudgetLimit],
    transactions: Iterable[TransactionRecord],
    month: int,
    year: int,
) -> List[BudgetStatus]:
    """
    Join the month's budgets with the expenses booked in that month.

    Only expenses dated within the month count, and only toward the budget of
    their own category. Categories without a budget produce no row, and
    budgets for other months are skipped.

    Returns:
        One status per budget, in the order the budgets were given.
    """
    first_day, last_day = month_bounds(year, month)

    spent_by_category: Dict[Any, float] = {}
    for t in transactions:
        if not t.is_expense or t.date < first_day or t.date > last_day:
            continue
        spent_by_category[t.category_id] = spent_by_category.get(t.category_id, 0.0) + t.amount

    statuses = []
    for b in budgets:
        if b.month != month or b.year != year:
            continue
        spent = round_money(spent_by_category.get(b.category_id, 0.0))
        statuses.append(
            BudgetStatus(
                budget_id=b.budget_id,
                category_id=b.category_id,
                category_name=b.category_name,
                category_icon=b.category_icon,
                month=b.month,
                year=b.year,
                limit=round_money(b.monthly_limit),
                spent=spent,
                remaining=round_money(b.monthly_limit - spent),
                is_over=spent > b.monthly_limit,
                percentage=budget_percentage(spent, b.monthly_limit),
            )
        )

    logger.debug(
        "budgets_evaluated",
        month=month,
        year=year,
        count=len(statuses),
        over=sum(1 for s in statuses if s.is_over),
    )
    return statuses
